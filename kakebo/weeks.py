"""Month arithmetic and the fixed four-week partition of a month.

Weeks are calendar-day ranges, not ISO weeks: days 1-7, 8-14, 15-21 and
22 to the end of the month. The last bucket absorbs days 29-31.
"""
import calendar
from datetime import date, datetime
from functools import lru_cache
from typing import Tuple, Union

from kakebo.domain import WeekBucket
from kakebo.exceptions import InvalidMonthError
from kakebo.functional import Maybe, Nothing, Some

MonthLike = Union[str, Tuple[int, int]]

# (ordinal, first day, last day); None means "last day of the month"
_FIXED_WEEKS = (
    (1, 1, 7),
    (2, 8, 14),
    (3, 15, 21),
    (4, 22, None),
)


def parse_month(month: MonthLike) -> Tuple[int, int]:
    """Return (year, month) for "YYYY-MM" or a (year, month) pair.

    Raises InvalidMonthError: a bad month is a caller bug, not user data.
    """
    if isinstance(month, tuple) and len(month) == 2:
        year, num = month
    elif isinstance(month, str):
        parts = month.strip().split("-")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise InvalidMonthError(f"Expected YYYY-MM, got {month!r}")
        year, num = int(parts[0]), int(parts[1])
    else:
        raise InvalidMonthError(f"Expected YYYY-MM, got {month!r}")

    if not isinstance(year, int) or not isinstance(num, int) or not 1 <= num <= 12 or not 1 <= year <= 9999:
        raise InvalidMonthError(f"Month out of range: {month!r}")
    return year, num


def format_month(year: int, num: int) -> str:
    return f"{year:04d}-{num:02d}"


def normalize_month(month: MonthLike) -> str:
    return format_month(*parse_month(month))


def month_key(day: Union[date, datetime]) -> str:
    return format_month(day.year, day.month)


def first_day(month: MonthLike) -> date:
    year, num = parse_month(month)
    return date(year, num, 1)


def last_day(month: MonthLike) -> date:
    year, num = parse_month(month)
    return date(year, num, calendar.monthrange(year, num)[1])


def shift_month(month: MonthLike, delta: int) -> str:
    year, num = parse_month(month)
    index = year * 12 + (num - 1) + delta
    return format_month(index // 12, index % 12 + 1)


def compare_months(a: MonthLike, b: MonthLike) -> int:
    """-1, 0 or 1 as month a is before, equal to or after month b."""
    pa, pb = parse_month(a), parse_month(b)
    return (pa > pb) - (pa < pb)


def as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def parse_date(value) -> Maybe[date]:
    """Parse a calendar day without raising.

    Accepts date/datetime objects, "YYYY-MM-DD", and full ISO timestamps such as
    "2025-11-20T03:00:00.000Z" (only the calendar day is kept). Rolled-over values
    like "2025-13-01" or "2025-02-30" give Nothing().
    """
    if isinstance(value, (date, datetime)):
        return Some(as_date(value))
    if not isinstance(value, str) or not value.strip():
        return Nothing()

    text = value.strip()
    if "T" in text:
        text = text.split("T", 1)[0]
    parts = text.split("-")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return Nothing()
    try:
        return Some(date(int(parts[0]), int(parts[1]), int(parts[2])))
    except ValueError:
        return Nothing()


def _label(ordinal: int, start: date, end: date) -> str:
    return f"Week {ordinal} ({start.day:02d}-{end.day:02d})"


@lru_cache(maxsize=256)
def _partition(year: int, num: int) -> Tuple[WeekBucket, ...]:
    month_start = date(year, num, 1)
    month_end = date(year, num, calendar.monthrange(year, num)[1])

    weeks = []
    for ordinal, start_day, end_day in _FIXED_WEEKS:
        start = max(date(year, num, start_day), month_start)
        end = month_end if end_day is None else min(date(year, num, end_day), month_end)
        if start > end:
            continue
        weeks.append(WeekBucket(ordinal=ordinal, start_date=start, end_date=end, label=_label(ordinal, start, end)))
    return tuple(weeks)


def partition_month(month: MonthLike) -> Tuple[WeekBucket, ...]:
    """The month's week buckets, ordered by ordinal."""
    return _partition(*parse_month(month))


def week_for(day: date, weeks: Tuple[WeekBucket, ...]) -> Maybe[WeekBucket]:
    for week in weeks:
        if week.contains(day):
            return Some(week)
    return Nothing()
