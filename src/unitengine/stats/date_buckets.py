"""Calendar buckets: half-open date intervals of a fixed calendar unit.

A :class:`DateBucket` tracks the interval ``[bucket_start, bucket_end)``
containing the last date it was advanced to. Without a reference date the
interval follows natural calendar boundaries (midnight, start of week, first
of the month, January 1). With a reference date intervals are counted from it,
so weekly buckets can start on the reference weekday and monthly buckets on
the reference day of month.

Naive datetimes are read as wall-clock times in the calendar; aware datetimes
are converted to the calendar timezone first. Do not mix the two on a single
bucket.
"""

from __future__ import annotations

import calendar as _calendar
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional, Tuple

from unitengine.core.settings import CalendarSettings, get_settings


class CalendarUnit(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


_FIXED_PERIODS = {
    CalendarUnit.DAY: timedelta(days=1),
    CalendarUnit.WEEK: timedelta(weeks=1),
}
_MONTHS = {
    CalendarUnit.MONTH: 1,
    CalendarUnit.YEAR: 12,
}


def add_months(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` by whole months, clamping the day to the month length."""

    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, _calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class DateBucket:
    def __init__(
        self,
        unit: CalendarUnit,
        reference_date: Optional[datetime] = None,
        calendar: Optional[CalendarSettings] = None,
    ) -> None:
        self.unit = CalendarUnit(unit)
        self.calendar = calendar if calendar is not None else get_settings().calendar
        self.reference_date = (
            self._normalize(reference_date) if reference_date is not None else None
        )
        self.bucket_start: Optional[datetime] = None
        self.bucket_end: Optional[datetime] = None

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return (
            f"DateBucket(unit={self.unit.value}, start={self.bucket_start}, "
            f"end={self.bucket_end})"
        )

    # ------------------------------------------------------------------
    def contains(self, date: datetime) -> bool:
        """Whether ``date`` falls in the current interval."""

        if self.bucket_start is None or self.bucket_end is None:
            return False
        moment = self._normalize(date)
        return self.bucket_start <= moment < self.bucket_end

    def advance(self, date: datetime) -> bool:
        """Move the bucket to the interval containing ``date``.

        Returns ``True`` when the interval changed.
        """

        if self.contains(date):
            return False
        self.bucket_start, self.bucket_end = self.interval_for(date)
        return True

    def interval_for(self, date: datetime) -> Tuple[datetime, datetime]:
        """The interval containing ``date``, without changing the bucket."""

        moment = self._normalize(date)
        if self.reference_date is None:
            start = self._natural_start(moment)
            return start, self._shift(start, 1)
        return self._anchored_interval(moment, self.reference_date)

    # ------------------------------------------------------------------
    def _normalize(self, date: datetime) -> datetime:
        if date.tzinfo is None:
            return date
        return date.astimezone(self.calendar.tzinfo)

    def _natural_start(self, moment: datetime) -> datetime:
        midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
        if self.unit is CalendarUnit.DAY:
            return midnight
        if self.unit is CalendarUnit.WEEK:
            back = (midnight.weekday() - self.calendar.first_weekday) % 7
            return midnight - timedelta(days=back)
        if self.unit is CalendarUnit.MONTH:
            return midnight.replace(day=1)
        return midnight.replace(month=1, day=1)

    def _shift(self, start: datetime, count: int) -> datetime:
        if self.unit in _FIXED_PERIODS:
            return start + _FIXED_PERIODS[self.unit] * count
        return add_months(start, _MONTHS[self.unit] * count)

    def _anchored_interval(self, moment: datetime, anchor: datetime) -> Tuple[datetime, datetime]:
        if self.unit in _FIXED_PERIODS:
            period = _FIXED_PERIODS[self.unit]
            count = (moment - anchor) // period
        else:
            step = _MONTHS[self.unit]
            months = (moment.year - anchor.year) * 12 + (moment.month - anchor.month)
            count = months // step
            # clamped month ends can put the estimate one period off either way
            while self._shift(anchor, count) > moment:
                count -= 1
            while self._shift(anchor, count + 1) <= moment:
                count += 1
        return self._shift(anchor, count), self._shift(anchor, count + 1)


def schedule(
    unit: CalendarUnit,
    from_date: datetime,
    to_date: datetime,
    *,
    reference_date: Optional[datetime] = None,
    calendar: Optional[CalendarSettings] = None,
) -> List[datetime]:
    """Start of every bucket intersecting ``[from_date, to_date]``, in order."""

    bucket = DateBucket(unit, reference_date=reference_date, calendar=calendar)
    end = bucket._normalize(to_date)
    starts: List[datetime] = []
    cursor = from_date
    while True:
        start, stop = bucket.interval_for(cursor)
        starts.append(start)
        if stop > end:
            break
        cursor = stop
    return starts


__all__ = ["CalendarUnit", "DateBucket", "add_months", "schedule"]
