from datetime import date
from typing import Callable

from kakebo.domain import Category, Record, RecordClass
from kakebo.weeks import MonthLike, first_day, last_day, parse_date

RecordPredicate = Callable[[Record], bool]


def by_record_class(record_class: RecordClass) -> RecordPredicate:
    def _filter(r: Record) -> bool:
        return r.record_class is record_class

    return _filter


def by_category(category: Category) -> RecordPredicate:
    def _filter(r: Record) -> bool:
        return r.category is category

    return _filter


def by_date_range(start: date, end: date) -> RecordPredicate:
    """Inclusive on both ends. Records with an unparseable date never match."""
    def _filter(r: Record) -> bool:
        return parse_date(r.date).map(lambda d: start <= d <= end).get_or_else(False)

    return _filter


def in_month(month: MonthLike) -> RecordPredicate:
    return by_date_range(first_day(month), last_day(month))
