"""Calendar partitioning helpers."""

from .date_buckets import CalendarUnit, DateBucket, add_months, schedule

__all__ = ["CalendarUnit", "DateBucket", "add_months", "schedule"]
