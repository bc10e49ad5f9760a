"""
Structured logging for download events.

Every event goes to the 'cookbook_cli.events' logger as a 'key=value' line and,
when a log directory is given, to a JSON-lines file that tools can parse.
"""

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from functools import partialmethod
from pathlib import Path
from typing import IO, Any


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class StructuredLogger:
    """
    Writes named events with keyword context.

    Usage:
        with StructuredLogger("cookbook_cli.events", log_dir=Path("logs")) as events:
            events.info("file_downloaded", category="recipes", size_bytes=412)
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
    ):
        """
        Args:
            name: Name of the stdlib logger used for console output.
            log_dir: Directory for the JSON-lines file. No file is written when None.
            enable_json: Write JSON lines into `log_dir`.
            enable_console: Forward events to the stdlib logger.
        """
        self._logger = logging.getLogger(name)
        self.enable_console = enable_console
        self.json_log_path: Path | None = None
        if enable_json and log_dir is not None:
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.json_log_path = Path(log_dir) / f"cookbook_cli_{stamp}.jsonl"
        self._stream: IO[str] | None = None
        self._closed = False
        self._context: dict[str, Any] = {
            "session_id": uuid.uuid4().hex[:12],
            "start_time": _now(),
        }

    def set_session_context(self, **kwargs) -> None:
        """Adds fields that are repeated in every JSON entry."""
        self._context.update(kwargs)

    def log(self, level: int, event: str, **context) -> None:
        if self.enable_console and self._logger.isEnabledFor(level):
            fields = " ".join(f"{key}={value}" for key, value in context.items())
            self._logger.log(level, f"[{event}] {fields}".rstrip())
        if self.json_log_path is not None and not self._closed:
            self._append(
                {
                    "timestamp": _now(),
                    "level": logging.getLevelName(level),
                    "event": event,
                    **self._context,
                    **context,
                }
            )

    debug = partialmethod(log, logging.DEBUG)
    info = partialmethod(log, logging.INFO)
    warning = partialmethod(log, logging.WARNING)
    error = partialmethod(log, logging.ERROR)

    def _append(self, entry: dict[str, Any]) -> None:
        try:
            if self._stream is None:
                self.json_log_path.parent.mkdir(parents=True, exist_ok=True)
                self._stream = open(self.json_log_path, "a", encoding="utf-8")  # noqa: SIM115
            self._stream.write(json.dumps(entry, default=str) + "\n")
            self._stream.flush()
        except OSError as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def close(self) -> None:
        self._closed = True
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def __enter__(self) -> "StructuredLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class CookbookEventLogger:
    """The events a cookbook download emits, with their fields."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def download_started(self, cookbook: str, version: str, requested_version: str):
        self.logger.info(
            "cookbook_download_started",
            cookbook=cookbook,
            version=version,
            requested_version=requested_version,
        )

    def category_started(self, category: str, item_count: int, destination: Path):
        self.logger.info(
            "category_download_started",
            category=category,
            item_count=item_count,
            destination=str(destination),
        )

    def file_downloaded(self, category: str, path: Path, size_bytes: int):
        self.logger.debug(
            "file_downloaded", category=category, path=str(path), size_bytes=size_bytes
        )

    def download_completed(
        self, cookbook: str, path: Path, files: int, size_bytes: int, duration_s: float
    ):
        self.logger.info(
            "cookbook_download_completed",
            cookbook=cookbook,
            path=str(path),
            files=files,
            size_bytes=size_bytes,
            duration_s=round(duration_s, 2),
        )

    def download_failed(self, cookbook: str, version: str, error: BaseException):
        self.logger.error(
            "cookbook_download_failed",
            cookbook=cookbook,
            version=version,
            error_type=type(error).__name__,
            error=str(error),
        )


def create_structured_logger(
    log_dir: Path | None = None, enable_json: bool = False, enable_console: bool = False
) -> tuple[StructuredLogger, CookbookEventLogger]:
    """
    Creates the event loggers for one CLI run.

    Console output is off by default; the downloader already reports progress
    through the package logger.

    Returns:
        Tuple of (base_logger, event_logger)
    """
    base = StructuredLogger(
        "cookbook_cli.events",
        log_dir=log_dir,
        enable_json=enable_json,
        enable_console=enable_console,
    )
    return base, CookbookEventLogger(base)
