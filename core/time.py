# PATH: core/time.py
"""
Time utilities for MegaGecko.

Run timestamps are UTC; log filenames use the UTC calendar date.
"""

import time
from datetime import datetime, timezone


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Get current Unix timestamp in milliseconds."""
    return int(time.time() * 1000)


def to_iso(dt: datetime) -> str:
    """
    Format datetime as ISO-8601 UTC with millisecond precision.

    Example: "2026-10-18T09:30:00.123Z"
    """
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_date(dt: datetime) -> str:
    """UTC calendar date, e.g. "2026-10-18"."""
    return dt.astimezone(timezone.utc).date().isoformat()


def to_local_string(dt: datetime) -> str:
    """Render datetime in the machine's local timezone for human logs."""
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S %Z")
