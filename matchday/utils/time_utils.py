"""
Utility functions for the Matchday Sideline Timekeeper application.

Timestamps are epoch seconds (float) in memory. The helpers below convert
them to and from the persisted text forms.
"""
import re
import time
from datetime import datetime, timezone
from typing import Optional, Union


_INTERVAL_RE = re.compile(
    r"^(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{2}):(?P<seconds>\d{2}(?:\.\d+)?)$"
)


def fmt_mmss(seconds: Union[int, float]) -> str:
    """
    Format seconds as MM:SS string.

    Args:
        seconds: Number of seconds to format (fractions are truncated)

    Returns:
        Formatted time string in MM:SS format

    Example:
        >>> fmt_mmss(90)
        '01:30'
        >>> fmt_mmss(3661.7)
        '61:01'
    """
    seconds = max(0, int(seconds))
    m = seconds // 60
    s = seconds % 60
    return f"{m:02d}:{s:02d}"


def now_ts() -> float:
    """
    Get current timestamp in epoch seconds.

    Rounded to whole microseconds, the precision timestamps are persisted with.

    Returns:
        Current time as floating point epoch seconds
    """
    return round(time.time(), 6)


def ts_to_iso(ts: Optional[float]) -> Optional[str]:
    """Render an epoch timestamp as an ISO-8601 UTC string (None stays None)."""
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def parse_timestamp(value) -> Optional[float]:
    """
    Parse a persisted timestamp back to epoch seconds.

    Accepts ISO-8601 strings (naive values are taken as UTC), raw epoch
    numbers and None.

    Raises:
        ValueError: If the value cannot be interpreted as an instant
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def parse_duration(value) -> float:
    """
    Parse a persisted duration to seconds.

    Accepts a number of seconds or an interval string "[d.]hh:mm:ss[.fff]".

    Raises:
        ValueError: If the value is not a recognizable duration
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    match = _INTERVAL_RE.match(text)
    if match:
        days = int(match.group("days") or 0)
        return (
            days * 86400
            + int(match.group("hours")) * 3600
            + int(match.group("minutes")) * 60
            + float(match.group("seconds"))
        )
    return float(text)
