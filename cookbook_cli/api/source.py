"""
The capability the download core needs from a cookbook server.
"""

from typing import Protocol

from cookbook_cli.models.manifest import CookbookManifest


class CookbookSource(Protocol):
    """Anything that can fetch a cookbook manifest and its files."""

    async def fetch_manifest(self, name: str, version: str) -> CookbookManifest:
        """Returns the manifest for `name` at `version` (already resolved)."""
        ...

    async def fetch_file(self, url: str, destination_path: str) -> int:
        """Writes the body of `url` to `destination_path`, returning its size."""
        ...
