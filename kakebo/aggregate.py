"""Record classification and per-class, per-category and per-week sums."""
from functools import reduce
from typing import Dict, Iterable, NamedTuple, Tuple

from kakebo.domain import Category, Record, RecordClass, WeekBucket
from kakebo.filters import by_record_class
from kakebo.functional import safe_category
from kakebo.logger import get_logger
from kakebo.weeks import parse_date, week_for

logger = get_logger(__name__)


class ClassifiedRecords(NamedTuple):
    income: Tuple[Record, ...]
    fixed_expenses: Tuple[Record, ...]
    variable_expenses: Tuple[Record, ...]


def classify(records: Iterable[Record]) -> ClassifiedRecords:
    records = tuple(records)
    return ClassifiedRecords(
        income=tuple(filter(by_record_class(RecordClass.INCOME), records)),
        fixed_expenses=tuple(filter(by_record_class(RecordClass.FIXED_EXPENSE), records)),
        variable_expenses=tuple(filter(by_record_class(RecordClass.VARIABLE_EXPENSE), records)),
    )


def total_value(records: Iterable[Record]) -> float:
    return reduce(lambda acc, r: acc + r.value, records, 0.0)


def total_by_class(records: Iterable[Record], record_class: RecordClass) -> float:
    return total_value(filter(by_record_class(record_class), records))


def empty_category_totals() -> Dict[Category, float]:
    return {cat: 0.0 for cat in Category}


def category_totals(variable_expenses: Iterable[Record]) -> Dict[Category, float]:
    totals = empty_category_totals()
    for r in variable_expenses:
        cat = safe_category(r.category).get_or_else(None)
        if cat is None:
            logger.debug("Record %s has no usable category, left out of category totals", r.id)
            continue
        totals[cat] += r.value
    return totals


def weekly_report(
    variable_expenses: Iterable[Record], weeks: Tuple[WeekBucket, ...]
) -> Dict[Category, Dict[str, float]]:
    """Category x week matrix of variable expense sums, keyed by week label.

    Every cell starts at 0. Records without a category or a parseable date, or
    dated outside every bucket, are skipped.
    """
    report = {cat: {w.label: 0.0 for w in weeks} for cat in Category}

    for r in variable_expenses:
        cat = safe_category(r.category).get_or_else(None)
        day = parse_date(r.date).get_or_else(None)
        if cat is None or day is None:
            logger.debug("Skipping record %s in weekly report: category=%r date=%r", r.id, r.category, r.date)
            continue
        week = week_for(day, weeks).get_or_else(None)
        if week is None:
            logger.debug("Record %s dated %s falls outside the month's weeks", r.id, day)
            continue
        report[cat][week.label] += r.value

    return report
