"""
Helper functions for formatting data into human-readable strings.
"""

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_size(bytes_size: int) -> str:
    """Formats bytes into a human-readable size string (e.g., '12.4 KB')."""
    if bytes_size <= 0:
        return "0 B"
    size = float(bytes_size)
    for unit in _SIZE_UNITS:
        if size < 1024 or unit == _SIZE_UNITS[-1]:
            break
        size /= 1024
    if unit == "B":
        return f"{int(size)} B"
    return f"{size:.1f} {unit}"


def format_duration(seconds: float) -> str:
    """
    Formats a duration for the download summary.

    Cookbook downloads usually finish in well under a minute, so sub-minute
    durations keep one decimal ('3.2s'); longer ones read '2m 05s'.
    """
    if seconds < 60:
        return f"{max(seconds, 0.0):.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs:02d}s"
