from datetime import datetime, timedelta, timezone

import pytest

from unitengine.core.settings import CalendarSettings
from unitengine.stats.date_buckets import CalendarUnit, DateBucket, add_months, schedule


UTC = CalendarSettings(timezone="UTC")


def test_day_bucket_advances_on_boundaries():
    bucket = DateBucket(CalendarUnit.DAY, calendar=UTC)
    assert bucket.advance(datetime(2024, 3, 15, 10, 0)) is True
    assert bucket.bucket_start == datetime(2024, 3, 15)
    assert bucket.bucket_end == datetime(2024, 3, 16)

    assert bucket.contains(datetime(2024, 3, 15, 23, 59))
    assert bucket.advance(datetime(2024, 3, 15, 23, 59)) is False

    assert bucket.advance(datetime(2024, 3, 16)) is True
    assert (bucket.bucket_start, bucket.bucket_end) == (datetime(2024, 3, 16), datetime(2024, 3, 17))


def test_contains_is_false_before_first_advance():
    bucket = DateBucket(CalendarUnit.MONTH, calendar=UTC)
    assert bucket.contains(datetime(2024, 3, 15)) is False
    assert bucket.bucket_start is None


@pytest.mark.parametrize(
    "first_weekday, expected_start",
    [(0, datetime(2024, 3, 11)), (6, datetime(2024, 3, 10))],
)
def test_week_bucket_respects_first_weekday(first_weekday, expected_start):
    calendar = CalendarSettings(first_weekday=first_weekday)
    bucket = DateBucket(CalendarUnit.WEEK, calendar=calendar)
    bucket.advance(datetime(2024, 3, 15, 8, 30))
    assert bucket.bucket_start == expected_start
    assert bucket.bucket_end == expected_start + timedelta(days=7)


def test_month_and_year_buckets():
    month = DateBucket(CalendarUnit.MONTH, calendar=UTC)
    month.advance(datetime(2024, 2, 29, 12))
    assert (month.bucket_start, month.bucket_end) == (datetime(2024, 2, 1), datetime(2024, 3, 1))

    year = DateBucket(CalendarUnit.YEAR, calendar=UTC)
    year.advance(datetime(2024, 12, 31, 23, 59))
    assert (year.bucket_start, year.bucket_end) == (datetime(2024, 1, 1), datetime(2025, 1, 1))


def test_reference_date_anchors_fixed_periods():
    bucket = DateBucket(CalendarUnit.WEEK, reference_date=datetime(2024, 1, 3), calendar=UTC)
    bucket.advance(datetime(2024, 1, 20))
    assert bucket.bucket_start == datetime(2024, 1, 17)
    bucket.advance(datetime(2023, 12, 30))
    assert bucket.bucket_start == datetime(2023, 12, 27)


def test_reference_date_anchors_months_with_clamped_days():
    bucket = DateBucket(CalendarUnit.MONTH, reference_date=datetime(2024, 1, 31), calendar=UTC)
    bucket.advance(datetime(2024, 3, 5))
    assert (bucket.bucket_start, bucket.bucket_end) == (datetime(2024, 2, 29), datetime(2024, 3, 31))
    bucket.advance(datetime(2024, 4, 29))
    assert (bucket.bucket_start, bucket.bucket_end) == (datetime(2024, 3, 31), datetime(2024, 4, 30))
    assert bucket.advance(datetime(2024, 4, 30)) is True
    assert bucket.bucket_start == datetime(2024, 4, 30)


def test_aware_dates_are_converted_to_calendar_timezone():
    calendar = CalendarSettings(timezone="UTC")
    bucket = DateBucket(CalendarUnit.DAY, calendar=calendar)
    plus_five = timezone(timedelta(hours=5))
    bucket.advance(datetime(2024, 3, 16, 2, 0, tzinfo=plus_five))
    assert bucket.bucket_start == datetime(2024, 3, 15, tzinfo=timezone.utc)


def test_add_months_clamps_day():
    assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)
    assert add_months(datetime(2023, 1, 31), 1) == datetime(2023, 2, 28)
    assert add_months(datetime(2024, 11, 15), 3) == datetime(2025, 2, 15)
    assert add_months(datetime(2024, 1, 15), -1) == datetime(2023, 12, 15)


def test_schedule_lists_every_intersecting_bucket():
    starts = schedule(CalendarUnit.MONTH, datetime(2024, 1, 15), datetime(2024, 4, 2), calendar=UTC)
    assert starts == [datetime(2024, m, 1) for m in (1, 2, 3, 4)]

    days = schedule(CalendarUnit.DAY, datetime(2024, 3, 15, 10), datetime(2024, 3, 15, 11), calendar=UTC)
    assert days == [datetime(2024, 3, 15)]


def test_bucket_defaults_to_global_calendar():
    bucket = DateBucket("day")
    assert bucket.unit is CalendarUnit.DAY
    assert bucket.calendar == CalendarSettings()
