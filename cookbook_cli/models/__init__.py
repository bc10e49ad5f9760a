"""
Data Models Layer.

This package contains the Pydantic models and dataclasses that define the
core data structures used throughout the application: the cookbook manifest,
configuration and download statistics.
"""

from .config import ClientConfig
from .manifest import CookbookItem, CookbookManifest
from .stats import DownloadStats

__all__ = ["ClientConfig", "CookbookItem", "CookbookManifest", "DownloadStats"]
