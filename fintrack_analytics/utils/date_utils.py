"""Date manipulation utilities"""

from datetime import date

from dateutil.relativedelta import relativedelta


def months_between(start: date, end: date) -> int:
    """
    Count whole calendar months from start to end.

    A month is complete once end reaches start's day-of-month, or the last
    day of a shorter month: 2026-01-15 -> 2026-02-14 is 0 months,
    2026-01-15 -> 2026-02-15 and 2026-01-31 -> 2026-02-28 are 1.
    Negative when end is before start.
    """
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def month_key(value: date) -> str:
    """Year-month bucket label, e.g. '2026-03'"""
    return f"{value.year:04d}-{value.month:02d}"
