"""
Time utilities for the Sideline Manager application.

The engine works in epoch milliseconds; the persistence boundary works in
ISO-8601 text. This module holds the conversions between the two along with
the rounding rule used for every elapsed-seconds computation.
"""
import math
import time
from datetime import datetime, timedelta, timezone
from typing import Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def fmt_mmss(seconds: int) -> str:
    """
    Format seconds as MM:SS string.

    Args:
        seconds: Number of seconds to format

    Returns:
        Formatted time string in MM:SS format

    Example:
        >>> fmt_mmss(90)
        '01:30'
        >>> fmt_mmss(3661)
        '61:01'
    """
    seconds = max(0, int(seconds))
    m = seconds // 60
    s = seconds % 60
    return f"{m:02d}:{s:02d}"


def now_ms() -> int:
    """
    Get current wall-clock time in epoch milliseconds.

    Returns:
        Current time as integer epoch milliseconds
    """
    return int(time.time() * 1000)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going toward positive infinity (-0.5 -> 0, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def elapsed_seconds(start_ms: int, end_ms: int) -> float:
    """Seconds between two epoch-millisecond instants (unrounded)."""
    return (end_ms - start_ms) / 1000


def ms_to_iso(value: Optional[int]) -> Optional[str]:
    """
    Convert epoch milliseconds to an ISO-8601 UTC string.

    Args:
        value: Epoch milliseconds, or None

    Returns:
        ISO-8601 text with millisecond precision, or None
    """
    if value is None:
        return None
    instant = EPOCH + timedelta(milliseconds=int(value))
    return instant.isoformat(timespec="milliseconds")


def iso_to_ms(value: Optional[str]) -> Optional[int]:
    """
    Convert ISO-8601 text to epoch milliseconds.

    Naive timestamps are treated as UTC. A trailing ``Z`` is accepted.

    Args:
        value: ISO-8601 string, or None/empty

    Returns:
        Epoch milliseconds, or None

    Raises:
        ValueError: If the text is not a valid ISO-8601 timestamp
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    instant = datetime.fromisoformat(text)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return (instant - EPOCH) // timedelta(milliseconds=1)
