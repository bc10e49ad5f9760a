"""
Core application engine for orchestrating cookbook downloads.

The `CookbookDownloader` resolves the version, fetches the manifest and walks
the category table in `categories`, delegating every file transfer to the
injected `CookbookSource`.
"""

from .categories import CATEGORIES, Category
from .download_manager import CookbookDownloader

__all__ = ["CATEGORIES", "Category", "CookbookDownloader"]
