from datetime import date, datetime
from typing import Callable, Optional, Tuple, Union

from kakebo.dashboard import build_dashboard
from kakebo.domain import Category, DashboardSnapshot, EducationalMessage, Goal, Record, RecordClass, WeekBucket
from kakebo.events import (
    DASHBOARD_UPDATED,
    GOAL_CHANGED,
    INPUT_EVENTS,
    MONTH_SELECTED,
    RECORDS_CHANGED,
    TODAY_CHANGED,
    Event,
    EventBus,
)
from kakebo.exceptions import ValidationError
from kakebo.functional import safe_category
from kakebo.lazy import records_in_week
from kakebo.logger import get_logger
from kakebo.store import LedgerStore, MonthData, load_month
from kakebo.weeks import MonthLike, as_date, compare_months, month_key, normalize_month, parse_date, shift_month

logger = get_logger(__name__)


class FinanceService:
    """Holds the dashboard inputs and re-derives the snapshot whenever one changes.

    The service owns no budgeting logic: every input event reloads the selected
    month from the store and calls build_dashboard from scratch.

    clock: returns the wall-clock date; replaced in tests.
    today: optional test date overriding the clock until reset.
    seed_path: when set, the ledger is written there after every mutation.
    """

    def __init__(
        self,
        store: LedgerStore,
        today: Optional[Union[date, datetime, str]] = None,
        month: Optional[MonthLike] = None,
        clock: Callable[[], date] = date.today,
        bus: Optional[EventBus] = None,
        seed_path: Optional[str] = None,
    ):
        self.store = store
        self.bus = bus or EventBus()
        self.seed_path = seed_path
        self._clock = clock
        self._test_date: Optional[date] = self._coerce_date(today) if today is not None else None
        self._month = normalize_month(month) if month is not None else month_key(self.today)
        self._data: Optional[MonthData] = None
        self._snapshot: Optional[DashboardSnapshot] = None

        for name in INPUT_EVENTS:
            self.bus.subscribe(name, self._on_input_changed)
        if seed_path:
            self.bus.subscribe(RECORDS_CHANGED, self._on_ledger_changed)
            self.bus.subscribe(GOAL_CHANGED, self._on_ledger_changed)
        self._recompute()

    @staticmethod
    def _coerce_date(value) -> date:
        parsed = parse_date(value).get_or_else(None)
        if parsed is None:
            raise ValidationError(f"Invalid date {value!r}", {"error": "invalid_date", "date": value})
        return parsed

    # --- inputs ---

    @property
    def today(self) -> date:
        return self._test_date if self._test_date is not None else as_date(self._clock())

    @property
    def month(self) -> str:
        return self._month

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._data.records if self._data else ()

    @property
    def goal(self) -> Optional[Goal]:
        return self._data.goal if self._data else None

    @property
    def is_past_month(self) -> bool:
        return compare_months(self._month, month_key(self.today)) < 0

    @property
    def is_future_month(self) -> bool:
        return compare_months(self._month, month_key(self.today)) > 0

    # --- derived ---

    @property
    def dashboard(self) -> DashboardSnapshot:
        return self._snapshot

    @property
    def educational_message(self) -> Optional[EducationalMessage]:
        return self._snapshot.educational_message if self._snapshot else None

    def week_expenses(self, week: WeekBucket) -> Tuple[Record, ...]:
        return tuple(records_in_week(self.records, week))

    # --- recomputation ---

    def _derive(self, data: MonthData) -> DashboardSnapshot:
        self._data = data
        self._snapshot = build_dashboard(self._month, data.records, data.goal, self.today)
        self.bus.publish(DASHBOARD_UPDATED, {"month": self._month, "snapshot": self._snapshot})
        return self._snapshot

    def _recompute(self) -> DashboardSnapshot:
        data = MonthData(
            month=self._month,
            records=self.store.records_for_month(self._month),
            goal=self.store.goal_for_month(self._month),
        )
        return self._derive(data)

    async def refresh(self) -> DashboardSnapshot:
        """Reload the selected month through the async loader, for callers already in a loop."""
        return self._derive(await load_month(self.store, self._month))

    def _on_input_changed(self, event: Event, payload: dict) -> dict:
        logger.debug("Recomputing dashboard for %s after %s", self._month, event.name)
        snapshot = self._recompute()
        return {"month": snapshot.month, "weekly_allowance": snapshot.weekly_allowance}

    def _on_ledger_changed(self, event: Event, payload: dict) -> dict:
        self.store.save(self.seed_path)
        return {"saved": self.seed_path}

    # --- navigation ---

    def select_month(self, month: MonthLike) -> DashboardSnapshot:
        self._month = normalize_month(month)
        self.bus.publish(MONTH_SELECTED, {"month": self._month})
        return self._snapshot

    def navigate_month(self, direction: str) -> DashboardSnapshot:
        if direction == "prev":
            return self.select_month(shift_month(self._month, -1))
        if direction == "next":
            return self.select_month(shift_month(self._month, 1))
        return self.select_month(direction)

    def set_test_date(self, value: Optional[Union[str, date]]) -> DashboardSnapshot:
        """Override "today"; None goes back to the wall clock."""
        self._test_date = self._coerce_date(value) if value else None
        self.bus.publish(TODAY_CHANGED, {"today": self.today.isoformat()})
        return self._snapshot

    # --- mutations ---

    def _add(self, record: Record) -> Record:
        saved = self.store.add_record(record)
        self.bus.publish(RECORDS_CHANGED, {"action": "add", "id": saved.id})
        return saved

    def add_income(self, name: str, value: float, day: Union[str, date]) -> Record:
        return self._add(Record(id=None, date=day, value=value, name=name, record_class=RecordClass.INCOME))

    def add_fixed_expense(
        self, name: str, value: float, day: Union[str, date], due_date: Optional[Union[str, date]] = None
    ) -> Record:
        return self._add(Record(
            id=None, date=day, value=value, name=name,
            record_class=RecordClass.FIXED_EXPENSE, due_date=due_date,
        ))

    def add_variable_expense(
        self, name: str, value: float, day: Union[str, date], category: Union[Category, str, int]
    ) -> Record:
        cat = safe_category(category).get_or_else(None)
        if cat is None:
            raise ValidationError(f"Unknown category {category!r}", {"error": "category_required", "category": category})
        return self._add(Record(
            id=None, date=day, value=value, name=name,
            record_class=RecordClass.VARIABLE_EXPENSE, category=cat,
        ))

    def update_fixed_expense(self, record_id: int, **changes) -> Record:
        current = self.store.get_record(record_id)
        if current.record_class is not RecordClass.FIXED_EXPENSE:
            raise ValidationError(f"Record {record_id} is not a fixed expense", {"error": "not_fixed_expense"})
        updated = self.store.update_record(record_id, **changes)
        self.bus.publish(RECORDS_CHANGED, {"action": "update", "id": record_id})
        return updated

    def delete_record(self, record_id: int) -> None:
        self.store.delete_record(record_id)
        self.bus.publish(RECORDS_CHANGED, {"action": "delete", "id": record_id})

    def update_goal(self, value, month: Optional[MonthLike] = None) -> Goal:
        goal = self.store.set_goal(month if month is not None else self._month, value)
        self.bus.publish(GOAL_CHANGED, {"month": goal.month, "value": goal.value})
        return goal
