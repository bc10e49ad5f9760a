"""
Utilities for handling local file paths.
"""

from pathlib import Path

DIR_MODE = 0o755


def create_dir(directory_path: Path, mode: int = DIR_MODE) -> None:
    """Creates a directory and its parents if they do not already exist."""
    directory_path.mkdir(mode=mode, parents=True, exist_ok=True)
