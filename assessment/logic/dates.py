"""
Calendar helpers.

Every function takes the evaluation instant explicitly; nothing here reads
the system clock.
"""

import math
from datetime import date, datetime, time
from typing import Optional, Union

from .constants import DAYS_PER_MONTH

Instant = Union[date, datetime]

_SECONDS_PER_MONTH = DAYS_PER_MONTH * 24 * 60 * 60


def as_date(now: Instant) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def as_datetime(value: Instant, like: Optional[Instant] = None) -> datetime:
    """Promote a date to midnight, matching the tz-awareness of ``like``."""
    if isinstance(value, datetime):
        return value
    tzinfo = like.tzinfo if isinstance(like, datetime) else None
    return datetime.combine(value, time.min, tzinfo=tzinfo)


def calculate_age(date_of_birth: date, now: Instant) -> int:
    """Whole years; one less if the birthday has not occurred yet this year."""
    today = as_date(now)
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def months_until(target: date, now: Instant) -> int:
    """
    30-day months from ``now`` until ``target``, rounded up.
    Negative when the target is already in the past.
    """
    delta = as_datetime(target, now) - as_datetime(now, now)
    return math.ceil(delta.total_seconds() / _SECONDS_PER_MONTH)


def months_since(target: date, now: Instant) -> int:
    """30-day months elapsed since ``target``, rounded up."""
    delta = as_datetime(now, now) - as_datetime(target, now)
    return math.ceil(delta.total_seconds() / _SECONDS_PER_MONTH)


def months_between(start: date, end: date) -> float:
    """Fractional 30-day months from ``start`` to ``end``."""
    return (end - start).days / DAYS_PER_MONTH
