"""Wall-clock helpers.

All gating works in local time: daily quotas reset at local midnight.
Components take an optional ``clock`` callable so tests can pin time.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current local time as a naive datetime."""
    return datetime.now()


def to_epoch_ms(moment: datetime) -> int:
    """Epoch milliseconds for a datetime (naive values are local time)."""
    return int(moment.timestamp() * 1000)


def local_date_of_ms(timestamp_ms: int) -> date:
    """Local calendar date of an epoch-millisecond timestamp."""
    return datetime.fromtimestamp(timestamp_ms / 1000).date()


def format_local_time(timestamp_ms: int) -> str:
    """Format an epoch-millisecond timestamp as local ``HH:MM:SS``."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M:%S")


def js_weekday(moment: datetime) -> int:
    """Day of week with Sunday as 0 and Saturday as 6."""
    return (moment.weekday() + 1) % 7
