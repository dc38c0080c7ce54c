"""Half-open date range helpers."""

from collections.abc import Iterator
from datetime import date, datetime, timedelta

from stayengine.errors import InvalidRange

ONE_DAY = timedelta(days=1)


def as_date(value: date | datetime | str) -> date:
    """Normalize a datetime or ISO string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text).date()
    except ValueError as e:
        raise ValueError(f"Not an ISO date: {value!r}") from e


def overlaps(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Return True if [a_start, a_end) and [b_start, b_end) share a night.

    A stay checking out on the day another checks in does not overlap.
    """
    return a_start < b_end and b_start < a_end


def validate_range(start: date, end: date) -> None:
    if end <= start:
        raise InvalidRange(start, end)


def nights_between(start: date, end: date) -> int:
    """Number of nights in [start, end). Raises InvalidRange for empty ranges."""
    validate_range(start, end)
    return (end - start).days


def each_night(start: date, end: date) -> Iterator[date]:
    """Yield every night in [start, end)."""
    day = start
    while day < end:
        yield day
        day += ONE_DAY


def last_night(check_out: date) -> date:
    return check_out - ONE_DAY
