"""
Formatting helpers for durations and download filenames.
"""

import math
import re
from numbers import Real
from typing import Any


UNKNOWN_DURATION = "Unknown"

_FILENAME_UNSAFE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def format_duration(seconds: Any) -> str:
    """
    Format a duration in seconds as ``M:SS`` or ``H:MM:SS``.

    Hours are omitted when zero and never padded; minutes are padded only
    when hours are shown.

    Args:
        seconds: Duration in seconds (int or float)

    Returns:
        Formatted duration, or "Unknown" for missing, NaN or negative input
    """
    if seconds is None or isinstance(seconds, bool) or not isinstance(seconds, Real):
        return UNKNOWN_DURATION

    if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        return UNKNOWN_DURATION

    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def build_attachment_filename(title: str, ext: str) -> str:
    """
    Build the download filename from a video title.

    Every character outside ``[a-z0-9]`` becomes an underscore and the
    result is lowercased, e.g. ``"My Clip!"`` -> ``"my_clip_.mp4"``.
    """
    return f"{_FILENAME_UNSAFE.sub('_', title or '').lower()}.{ext or 'mp4'}"
