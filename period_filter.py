"""Calendar windows used to select workout records.

``week`` is a rolling window of the seven days ending today, while
``month`` and ``year`` follow calendar boundaries. All comparisons are made
on local calendar days, never on elapsed time.
"""

from __future__ import annotations

import calendar
import datetime
from enum import Enum
from typing import Iterable, List

from errors import ValidationError
from models import WorkoutRecord, local_day

ROLLING_WEEK_DAYS = 7


class TimePeriod(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


def as_period(value: TimePeriod | str) -> TimePeriod:
    try:
        return TimePeriod(value)
    except ValueError:
        raise ValidationError(f"unknown period: {value}")


def reference_day(now: datetime.datetime | datetime.date | None) -> datetime.date:
    if now is None:
        return datetime.date.today()
    if isinstance(now, datetime.datetime):
        return local_day(now)
    return now


def period_range(
    period: TimePeriod | str,
    now: datetime.datetime | datetime.date | None = None,
) -> tuple[datetime.date, datetime.date]:
    """Return the inclusive ``(first_day, last_day)`` covered by ``period``."""
    period = as_period(period)
    today = reference_day(now)
    if period == TimePeriod.DAY:
        return today, today
    if period == TimePeriod.WEEK:
        return today - datetime.timedelta(days=ROLLING_WEEK_DAYS - 1), today
    if period == TimePeriod.MONTH:
        last = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last)
    return datetime.date(today.year, 1, 1), datetime.date(today.year, 12, 31)


def filter_records(
    records: Iterable[WorkoutRecord],
    period: TimePeriod | str,
    now: datetime.datetime | datetime.date | None = None,
) -> List[WorkoutRecord]:
    """Return the records whose calendar day falls inside ``period``.

    The input order is preserved.
    """
    first, last = period_range(period, now)
    return [r for r in records if first <= r.day <= last]
