"""
The orchestrator that turns a cookbook name and version into a local directory tree.
"""

import asyncio
import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Sequence

from rich.markup import escape

from cookbook_cli.api.source import CookbookSource
from cookbook_cli.models.manifest import CookbookItem, CookbookManifest
from cookbook_cli.models.stats import DownloadStats
from cookbook_cli.utils.path import create_dir
from cookbook_cli.utils.structured_logger import CookbookEventLogger
from cookbook_cli.utils.version import resolve_version

from .categories import CATEGORIES

log = logging.getLogger(__name__)


def item_destination(destination_dir: Path, item: CookbookItem) -> Path:
    """
    Returns where `item` is written inside `destination_dir`.

    Raises:
        ValueError: If the item name is absolute or climbs out of the directory.
    """
    relative = PurePosixPath(item.name)
    if not item.name or relative.is_absolute() or ".." in relative.parts:
        raise ValueError(
            f"Refusing to write cookbook file outside its directory: {item.name!r}"
        )
    return destination_dir / relative


class CookbookDownloader:
    """
    Downloads every file of a cookbook version into
    '<local_dir>/<cookbook_name>-<version>/', one subdirectory per category.

    The first failure stops the whole download and is raised unchanged.
    Files written before the failure are left in place.
    """

    def __init__(
        self,
        source: CookbookSource,
        max_workers: int = 1,
        events: Optional[CookbookEventLogger] = None,
    ):
        """
        Args:
            source: Provides the manifest and the file transfers.
            max_workers: 1 downloads files one at a time. Higher values run
                up to that many transfers at once across all categories.
            events: Receives structured download events when set.
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1.")
        self.source = source
        self.max_workers = max_workers
        self.events = events
        self.stats = DownloadStats()

    async def download(self, name: str, version: str) -> Path:
        """Downloads the cookbook into the current working directory."""
        return await self.download_at(name, version, Path.cwd())

    async def download_at(self, name: str, version: str, local_dir: Path) -> Path:
        """
        Downloads the cookbook into `local_dir`.

        Returns:
            The path of the cookbook directory, e.g. '<local_dir>/apache-0.1.0'.
        """
        self.stats = DownloadStats()
        resolved_version = resolve_version(version)

        try:
            manifest = await self.source.fetch_manifest(name, resolved_version)

            log.info(
                f"Downloading [bold]{escape(manifest.cookbook_name)}[/bold] cookbook "
                f"version [cyan]{escape(manifest.version)}[/cyan]"
            )
            if self.events:
                self.events.download_started(
                    manifest.cookbook_name, manifest.version, version
                )

            cookbook_path = Path(local_dir) / manifest.name
            if self.max_workers > 1:
                await self._download_concurrently(manifest, cookbook_path)
            else:
                for category in CATEGORIES:
                    await self.download_category(
                        category.items(manifest),
                        category.name,
                        category.destination(cookbook_path),
                    )
        except Exception as e:
            log.debug(f"Download of cookbook '{name}' ({resolved_version}) failed: {e}")
            if self.events:
                self.events.download_failed(name, resolved_version, e)
            raise

        self.stats.finish()
        log.info(f"[green]Cookbook downloaded to {escape(str(cookbook_path))}[/green]")
        if self.events:
            self.events.download_completed(
                manifest.name,
                cookbook_path,
                self.stats.files_downloaded,
                self.stats.bytes_downloaded,
                self.stats.duration_seconds,
            )
        return cookbook_path

    async def download_category(
        self,
        items: Sequence[CookbookItem],
        category_label: str,
        destination_dir: Path,
    ) -> None:
        """
        Downloads one category's items into `destination_dir`, in order.

        An empty category is skipped entirely and creates no directory.
        """
        if not items:
            return

        self._start_category(items, category_label, destination_dir)
        for item in items:
            await self._fetch_item(
                item, category_label, item_destination(destination_dir, item)
            )

    def _start_category(
        self,
        items: Sequence[CookbookItem],
        category_label: str,
        destination_dir: Path,
    ) -> None:
        log.info(f"  Downloading {escape(category_label)}")
        if self.events:
            self.events.category_started(category_label, len(items), destination_dir)
        create_dir(destination_dir)
        self.stats.record_category(category_label)

    async def _fetch_item(
        self, item: CookbookItem, category_label: str, destination: Path
    ) -> None:
        size = await self.source.fetch_file(item.url, str(destination))
        self.stats.record_file(size or 0)
        log.debug(f"    {escape(str(destination))} ({size} bytes)")
        if self.events:
            self.events.file_downloaded(category_label, destination, size or 0)

    async def _download_concurrently(
        self, manifest: CookbookManifest, cookbook_path: Path
    ) -> None:
        """
        Runs all transfers on a pool of `max_workers`.

        Directories are created up front in category order. Transfers start in
        manifest order; once one fails no further transfer starts, and the
        error of the earliest-started failed item is raised.
        """
        jobs: list[tuple[CookbookItem, str, Path]] = []
        for category in CATEGORIES:
            items = category.items(manifest)
            if not items:
                continue
            destination_dir = category.destination(cookbook_path)
            self._start_category(items, category.name, destination_dir)
            jobs.extend(
                (item, category.name, item_destination(destination_dir, item))
                for item in items
            )

        semaphore = asyncio.Semaphore(self.max_workers)
        failed = asyncio.Event()

        async def run_job(item: CookbookItem, label: str, destination: Path) -> None:
            async with semaphore:
                if failed.is_set():
                    return
                try:
                    await self._fetch_item(item, label, destination)
                except Exception:
                    failed.set()
                    raise

        results = await asyncio.gather(
            *(run_job(*job) for job in jobs), return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
