# /app/core/clock.py

"""
Time helpers. All stored timestamps are naive UTC datetimes.

Services take a `clock` callable so tests can pin "now"; production code uses
`utcnow`.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

Clock = Callable[[], datetime]

ONE_DAY = timedelta(days=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def day_start(moment: datetime) -> datetime:
    """UTC midnight of the day containing `moment`."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)
