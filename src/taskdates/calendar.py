"""Working-day calendar arithmetic.

Working days are Monday through Friday. No holiday calendar is modeled.
"""

from datetime import date, datetime, timedelta

SATURDAY = 5


def as_day(value: date | None) -> date | None:
    """Truncate a timestamp to its calendar day; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def is_working_day(day: date) -> bool:
    """Return True unless the day falls on a Saturday or Sunday."""
    return day.weekday() < SATURDAY


def add_working_days(start: date, n: int) -> date:
    """Advance from start until n working days have been consumed.

    The start day itself is not counted, so ``add_working_days(friday, 1)``
    is the following Monday. n = 0 returns start unchanged.
    """
    result = start
    remaining = n
    while remaining > 0:
        result += timedelta(days=1)
        if is_working_day(result):
            remaining -= 1
    return result


def skip_to_next_weekday(day: date) -> date:
    """Move a weekend day forward to the following Monday."""
    while not is_working_day(day):
        day += timedelta(days=1)
    return day


def next_working_day(day: date) -> date:
    """First working day strictly after day."""
    return add_working_days(day, 1)


def working_day_span_end(start: date, duration_days: int) -> date:
    """Last working day of a span of duration_days beginning on start.

    start is expected to be a working day and counts as the first day of the
    span, so a one-day span ends on start.
    """
    return add_working_days(start, max(duration_days, 1) - 1)


def count_working_days(start: date, end: date) -> int:
    """Number of working days in the inclusive range [start, end]."""
    if end < start:
        return 0
    count = 0
    day = start
    while day <= end:
        if is_working_day(day):
            count += 1
        day += timedelta(days=1)
    return count
