import json
from dataclasses import replace
from datetime import date
from typing import Any, Dict, Iterable, Optional, Tuple

import pandas as pd

from kakebo.domain import Category, DashboardSnapshot, Goal, Record, RecordClass
from kakebo.functional import safe_category
from kakebo.logger import get_logger
from kakebo.weeks import parse_date

logger = get_logger(__name__)

# legacy backend codes for record_type
_RECORD_CLASS_CODES = {
    "0": RecordClass.INCOME,
    "1": RecordClass.FIXED_EXPENSE,
    "2": RecordClass.VARIABLE_EXPENSE,
}


def parse_record_class(code: Any) -> RecordClass:
    if isinstance(code, RecordClass):
        return code
    text = str(code).strip().lower()
    if text in _RECORD_CLASS_CODES:
        return _RECORD_CLASS_CODES[text]
    for rc in RecordClass:
        if text in (rc.value, rc.name.lower()):
            return rc
    logger.warning("Unknown record type %r, treating it as a variable expense", code)
    return RecordClass.VARIABLE_EXPENSE


def _day_string(value: Any) -> Optional[str]:
    """Keep the calendar-day part of a timestamp; leave unparseable text as-is."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.isoformat()
    return parse_date(value).map(lambda d: d.isoformat()).get_or_else(str(value))


def record_from_raw(raw: Dict[str, Any]) -> Record:
    """Build a Record from a seed or backend row.

    Tolerates the legacy shape: string ids/values, "record_type" codes,
    integer categories, and ISO timestamps. Category problems are left for the
    engine to skip rather than raised here.
    """
    record_class = parse_record_class(raw.get("record_class", raw.get("record_type")))
    raw_category = raw.get("category")
    category = safe_category(raw_category).get_or_else(None)
    if raw_category is not None and category is None:
        logger.warning("Record %s has unknown category %r", raw.get("id"), raw_category)

    raw_id = raw.get("id")
    return Record(
        id=int(raw_id) if raw_id is not None else None,
        date=_day_string(raw.get("date")),
        value=float(raw.get("value", 0)),
        name=str(raw.get("name", "")),
        record_class=record_class,
        category=category,
        due_date=_day_string(raw.get("due_date")),
    )


def goal_from_raw(raw: Dict[str, Any]) -> Goal:
    # backend stores the goal against the first day of the month
    raw_id = raw.get("id")
    return Goal(
        value=float(raw["value"]),
        month=str(raw.get("month") or raw["date"])[:7],
        id=int(raw_id) if raw_id is not None else None,
    )


def record_to_raw(r: Record) -> Dict[str, Any]:
    return {
        "id": r.id,
        "date": _day_string(r.date),
        "value": r.value,
        "name": r.name,
        "record_class": r.record_class.value,
        "category": r.category.value if r.category is not None else None,
        "due_date": _day_string(r.due_date),
    }


def goal_to_raw(g: Goal) -> Dict[str, Any]:
    return {"id": g.id, "value": g.value, "month": g.month}


def load_seed(path: str) -> Tuple[Tuple[Record, ...], Tuple[Goal, ...]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    records = tuple(record_from_raw(r) for r in data.get("records", []))
    goals = tuple(goal_from_raw(g) for g in data.get("goals", []))
    logger.info("Loaded %d records and %d goals from %s", len(records), len(goals), path)
    return records, goals


def dump_seed(path: str, records: Iterable[Record], goals: Iterable[Goal]) -> None:
    data = {
        "records": [record_to_raw(r) for r in records],
        "goals": [goal_to_raw(g) for g in goals],
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def add_record(records: Tuple[Record, ...], r: Record) -> Tuple[Record, ...]:
    return records + (r,)


def replace_record(records: Tuple[Record, ...], record_id: int, **changes) -> Tuple[Record, ...]:
    return tuple(replace(r, **changes) if r.id == record_id else r for r in records)


def remove_record(records: Tuple[Record, ...], record_id: int) -> Tuple[Record, ...]:
    return tuple(filter(lambda r: r.id != record_id, records))


def upsert_goal(goals: Tuple[Goal, ...], goal: Goal) -> Tuple[Goal, ...]:
    return tuple(g for g in goals if g.month != goal.month) + (goal,)


def records_to_df(records: Iterable[Record]) -> pd.DataFrame:
    rows = [
        {
            "id": r.id,
            "date": pd.to_datetime(_day_string(r.date), errors="coerce"),
            "name": r.name,
            "value": r.value,
            "record_class": r.record_class.value,
            "category": r.category.label if r.category is not None else None,
            "due_date": pd.to_datetime(_day_string(r.due_date), errors="coerce"),
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=["id", "date", "name", "value", "record_class", "category", "due_date"])
    return df.sort_values("date", kind="stable").reset_index(drop=True)


def weekly_report_df(snapshot: DashboardSnapshot) -> pd.DataFrame:
    """Category rows x week columns, plus a Total column and a Total row."""
    labels = [w.label for w in snapshot.weeks]
    df = pd.DataFrame(
        [[snapshot.weekly_report[cat].get(label, 0.0) for label in labels] for cat in Category],
        index=[cat.label for cat in Category],
        columns=labels,
        dtype=float,
    )
    df["Total"] = df.sum(axis=1)
    df.loc["Total"] = df.sum(axis=0)
    return df
