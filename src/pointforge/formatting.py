from __future__ import annotations

from .constants import BIG_NUMBER_THRESHOLD

_SUFFIXES = ["", "K", "M", "B", "T", "Qa", "Qi"]


def format_number(value: int) -> str:
    """Format a point count for display: ``999``, ``1.5K``, ``2.3M``, ..."""
    if value < 0:
        return "-" + format_number(-value)
    if value < BIG_NUMBER_THRESHOLD:
        return str(value)
    magnitude = 0
    scaled = float(value)
    while scaled >= 1000 and magnitude < len(_SUFFIXES) - 1:
        scaled /= 1000.0
        magnitude += 1
    return f"{scaled:.1f}{_SUFFIXES[magnitude]}"
