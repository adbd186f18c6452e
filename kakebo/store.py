"""In-memory ledger standing in for the records/goals backend.

The store is the mutation boundary: records and goals are validated here and
rejected with ValidationError, so the engine only ever sees values >= 0.
"""
import asyncio
from dataclasses import replace
from typing import Iterable, NamedTuple, Optional, Tuple

from kakebo.domain import Goal, Record
from kakebo.exceptions import RecordNotFoundError, ValidationError
from kakebo.filters import in_month
from kakebo.functional import validate_goal_value, validate_record
from kakebo.logger import get_logger
from kakebo import transforms
from kakebo.weeks import MonthLike, normalize_month

logger = get_logger(__name__)


class MonthData(NamedTuple):
    month: str
    records: Tuple[Record, ...]
    goal: Optional[Goal]


def _raise_on_left(result, what: str):
    if result.is_left():
        error = result.get_error()
        raise ValidationError(f"Invalid {what}: {error['message']}", error)
    return result.get_or_else(None)


class LedgerStore:

    def __init__(self, records: Iterable[Record] = (), goals: Iterable[Goal] = ()):
        self._records: Tuple[Record, ...] = tuple(records)
        self._goals: Tuple[Goal, ...] = ()
        for g in goals:
            self._goals = transforms.upsert_goal(self._goals, g)

    @classmethod
    def from_seed(cls, path: str) -> "LedgerStore":
        records, goals = transforms.load_seed(path)
        return cls(records, goals)

    def save(self, path: str) -> None:
        transforms.dump_seed(path, self._records, self._goals)
        logger.info("Saved %d records and %d goals to %s", len(self._records), len(self._goals), path)

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    @property
    def goals(self) -> Tuple[Goal, ...]:
        return self._goals

    def _next_id(self, items) -> int:
        return max((i.id for i in items if i.id is not None), default=0) + 1

    def get_record(self, record_id: int) -> Record:
        for r in self._records:
            if r.id == record_id:
                return r
        raise RecordNotFoundError(record_id)

    def records_for_month(self, month: MonthLike) -> Tuple[Record, ...]:
        return tuple(filter(in_month(month), self._records))

    def goal_for_month(self, month: MonthLike) -> Optional[Goal]:
        key = normalize_month(month)
        return next((g for g in self._goals if g.month == key), None)

    def add_record(self, record: Record) -> Record:
        if record.id is None:
            record = replace(record, id=self._next_id(self._records))
        elif any(r.id == record.id for r in self._records):
            raise ValidationError(f"Record id {record.id} already exists", {"error": "duplicate_id"})
        record = _raise_on_left(validate_record(record), "record")
        self._records = transforms.add_record(self._records, record)
        logger.info("Added %s record %s (%s, %.2f)", record.record_class.value, record.id, record.name, record.value)
        return record

    def update_record(self, record_id: int, **changes) -> Record:
        current = self.get_record(record_id)
        if "id" in changes:
            raise ValidationError(f"Record {record_id} cannot change its id", {"error": "id_not_editable"})
        updated = _raise_on_left(validate_record(replace(current, **changes)), "record")
        self._records = transforms.replace_record(self._records, record_id, **changes)
        logger.info("Updated record %s: %s", record_id, ", ".join(sorted(changes)))
        return updated

    def delete_record(self, record_id: int) -> None:
        self.get_record(record_id)
        self._records = transforms.remove_record(self._records, record_id)
        logger.info("Deleted record %s", record_id)

    def set_goal(self, month: MonthLike, value) -> Goal:
        amount = _raise_on_left(validate_goal_value(value), "goal")
        key = normalize_month(month)
        existing = self.goal_for_month(key)
        if existing is not None:
            goal = replace(existing, value=amount)
        else:
            goal = Goal(value=amount, month=key, id=self._next_id(self._goals))
        self._goals = transforms.upsert_goal(self._goals, goal)
        logger.info("Goal for %s set to %.2f", key, amount)
        return goal


async def load_month(store: LedgerStore, month: MonthLike) -> MonthData:
    """Fetch a month's records and goal concurrently, like two backend calls."""
    key = normalize_month(month)

    async def fetch_records() -> Tuple[Record, ...]:
        await asyncio.sleep(0)
        return store.records_for_month(key)

    async def fetch_goal() -> Optional[Goal]:
        await asyncio.sleep(0)
        return store.goal_for_month(key)

    records, goal = await asyncio.gather(fetch_records(), fetch_goal())
    return MonthData(month=key, records=records, goal=goal)
