"""Size/duration formatting and input validation helpers."""

import math
import re
from pathlib import Path

GIB = 1024 * 1024 * 1024

MAX_PARTITION_SIZE_GB = 100.0

VIDEO_EXTENSIONS = (
    ".mp4", ".mkv", ".avi", ".mov", ".wmv", ".flv", ".webm", ".m4v", ".ts", ".mts",
)

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")

_TIMESTAMP_RE = re.compile(r"^(?:(?:(\d+):)?(\d+):)?(\d+(?:\.\d+)?)$")


def format_file_size(size_bytes: int) -> str:
    """Human-readable size using binary units, e.g. ``4.00 GB``."""
    if size_bytes <= 0:
        return "0 B"
    value = float(size_bytes)
    i = 0
    while value >= 1024 and i < len(_SIZE_UNITS) - 1:
        value /= 1024
        i += 1
    if i == 0:
        return f"{value:.0f} {_SIZE_UNITS[i]}"
    return f"{value:.2f} {_SIZE_UNITS[i]}"


def format_duration(total_seconds: float) -> str:
    """``MM:SS``, or ``HH:MM:SS`` once the duration reaches an hour."""
    h = int(total_seconds // 3600)
    m = int((total_seconds % 3600) // 60)
    s = int(total_seconds % 60)
    if h > 0:
        return f"{h:02d}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def gb_to_bytes(gb: float) -> int:
    return round(gb * GIB)


def bytes_to_gb(size_bytes: int) -> float:
    return size_bytes / GIB


def is_valid_partition_size(size_gb: float) -> bool:
    return math.isfinite(size_gb) and 0 < size_gb <= MAX_PARTITION_SIZE_GB


def is_video_file(path: str | Path) -> bool:
    return str(path).lower().endswith(VIDEO_EXTENSIONS)


def parse_timestamp(text: str | float | int) -> float:
    """Parse seconds or ``[HH:]MM:SS[.fff]`` into seconds.

    Numbers pass through unchanged. Minutes and seconds fields after the first
    field must be below 60.
    """
    if isinstance(text, bool):
        raise ValueError(f"Invalid timestamp: {text!r}")
    if isinstance(text, (int, float)):
        return float(text)
    if not isinstance(text, str):
        raise ValueError(f"Invalid timestamp: {text!r}")

    match = _TIMESTAMP_RE.match(text.strip())
    if match is None:
        raise ValueError(f"Invalid timestamp: {text!r}")

    hours, minutes, seconds = match.groups()
    secs = float(seconds)
    if minutes is not None and secs >= 60:
        raise ValueError(f"Invalid timestamp: {text!r}")
    if hours is not None and int(minutes) >= 60:
        raise ValueError(f"Invalid timestamp: {text!r}")

    return int(hours or 0) * 3600 + int(minutes or 0) * 60 + secs
