"""
Dataclass for tracking cookbook download statistics.
"""

import time
from dataclasses import dataclass, field


@dataclass
class DownloadStats:
    """Tracks statistics for a single cookbook download."""

    files_downloaded: int = 0
    bytes_downloaded: int = 0
    categories_downloaded: list[str] = field(default_factory=list)
    _start_time: float = field(default=0.0, repr=False)
    _end_time: float | None = field(default=None, repr=False)

    def __post_init__(self):
        self._start_time = time.monotonic()

    def record_category(self, category: str) -> None:
        self.categories_downloaded.append(category)

    def record_file(self, size_bytes: int) -> None:
        self.files_downloaded += 1
        self.bytes_downloaded += size_bytes

    def finish(self) -> None:
        self._end_time = time.monotonic()

    @property
    def duration_seconds(self) -> float:
        end = self._end_time if self._end_time is not None else time.monotonic()
        return end - self._start_time
