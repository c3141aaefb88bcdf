"""Calendar-day keys: the unit of "has this habit been logged today"."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Optional, Union

Clock = Callable[[], datetime]
Instant = Union[date, datetime]


def day_key(instant: Instant) -> date:
    """Truncate ``instant`` to its local calendar day.

    Aware datetimes are converted to local time first; naive ones are taken as
    local wall-clock time. Plain dates are already keys and come back unchanged.
    """

    if isinstance(instant, datetime):
        if instant.tzinfo is not None:
            instant = instant.astimezone()
        return instant.date()
    if isinstance(instant, date):
        return instant
    raise TypeError(f"Cannot derive a day key from {type(instant).__name__}")


def today_key(clock: Optional[Clock] = None) -> date:
    return day_key((clock or datetime.now)())


def yesterday_key(clock: Optional[Clock] = None) -> date:
    return today_key(clock) - timedelta(days=1)


__all__ = ["Clock", "Instant", "day_key", "today_key", "yesterday_key"]
