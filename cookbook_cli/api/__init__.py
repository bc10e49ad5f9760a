"""
Chef Server API Layer.

This package handles all communication with the Chef server.
"""

from .client import ChefAPIClient, ChefRequest
from .source import CookbookSource

__all__ = ["ChefAPIClient", "ChefRequest", "CookbookSource"]
