from collections import defaultdict
from typing import Callable, Iterable, Iterator, Tuple

from kakebo.domain import Category, Record, RecordClass, WeekBucket
from kakebo.filters import by_date_range, by_record_class


def iter_records(
    records: Iterable[Record], pred: Callable[[Record], bool]
) -> Iterator[Record]:
    for r in records:
        if pred(r):
            yield r


def records_in_week(records: Iterable[Record], week: WeekBucket) -> Iterator[Record]:
    """Variable expenses dated inside one week bucket, in input order."""
    is_variable = by_record_class(RecordClass.VARIABLE_EXPENSE)
    in_week = by_date_range(week.start_date, week.end_date)
    return iter_records(records, lambda r: is_variable(r) and in_week(r))


def lazy_top_categories(records: Iterable[Record], k: int) -> Iterator[Tuple[Category, float]]:
    totals: dict = defaultdict(float)

    for r in iter_records(records, by_record_class(RecordClass.VARIABLE_EXPENSE)):
        if isinstance(r.category, Category):
            totals[r.category] += r.value

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)

    for cat, total in ordered[: max(0, k)]:
        yield cat, total
