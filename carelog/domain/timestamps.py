"""
Local wall-clock timestamps as stored on disk.

Rows carry their time as ``YYYY-MM-DD HH:MM:SS`` text in local time
(no timezone, zero padded, 24-hour clock). Existing databases written by
the mobile app use the same text, so the format must not drift.
"""

from collections.abc import Callable
from datetime import date, datetime, time, timedelta

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current local wall-clock time, truncated to whole seconds."""
    return datetime.now().replace(microsecond=0)


def format_timestamp(moment: datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """Parse stored timestamp text back into a naive local datetime."""
    return datetime.strptime(text, TIMESTAMP_FORMAT)


def day_bounds(day: date) -> tuple[str, str]:
    """Half-open ``[start, end)`` timestamp texts covering one calendar day."""
    start = datetime.combine(day, time.min)
    return format_timestamp(start), format_timestamp(start + timedelta(days=1))
