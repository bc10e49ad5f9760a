"""
Pydantic model for application configuration.
Provides validation for all settings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CHEF_VERSION = "12.0.0"


class ClientConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Server
    server_url: str
    client_name: str = ""
    chef_version: str = DEFAULT_CHEF_VERSION

    # Download Settings
    max_workers: int = 1
    request_timeout: float = 60.0

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, v: str) -> str:
        """Requires an http(s) URL and drops any trailing slash."""
        if not v:
            raise ValueError("Server URL cannot be empty.")
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"Server URL must start with http:// or https://, but got: {v}"
            )
        return v.rstrip("/")

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 32:
            raise ValueError("Max workers must be between 1 and 32.")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Request timeout must be a positive number of seconds.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
