"""
Defines custom exceptions for the application.

Errors raised while talking to the server or writing files are never wrapped;
the aiohttp and OS exceptions reach the caller unchanged. The classes below
cover failures that originate in the application itself.
"""


class CookbookCliError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(CookbookCliError):
    """Raised for issues related to configuration loading or validation."""
