from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union


class RecordClass(Enum):
    INCOME = "income"
    FIXED_EXPENSE = "fixed_expense"
    VARIABLE_EXPENSE = "variable_expense"


# declaration order is the legacy integer code (0..3)
class Category(Enum):
    NECESSITY = "necessity"
    DESIRE = "desire"
    CULTURE = "culture"
    UNEXPECTED = "unexpected"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class EducationalState(Enum):
    FIRST_RECORD = "FIRST_RECORD"
    GOAL_NEAR = "GOAL_NEAR"
    GOAL_ACHIEVED = "GOAL_ACHIEVED"


DateLike = Union[str, date]


@dataclass(frozen=True)
class Record:
    id: Optional[int]
    date: DateLike                        # "2025-09-01" or a date
    value: float                          # always >= 0, sign comes from record_class
    name: str
    record_class: RecordClass
    category: Optional[Category] = None   # variable expenses only
    due_date: Optional[DateLike] = None   # fixed expenses only


# At most one goal per month; a missing goal is None, not Goal(value=0)
@dataclass(frozen=True)
class Goal:
    value: float
    month: str   # "YYYY-MM"
    id: Optional[int] = None


@dataclass(frozen=True)
class WeekBucket:
    ordinal: int
    start_date: date
    end_date: date   # inclusive through the whole day
    label: str

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class GoalComparison:
    goal: float
    realized_savings: float
    difference: float


@dataclass(frozen=True)
class EducationalMessage:
    state: EducationalState
    goal_value: Optional[float] = None


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class DashboardSnapshot:
    month: str
    evaluation_date: date
    weeks: Tuple[WeekBucket, ...]
    total_income: float
    total_fixed_expenses: float
    total_variable_expenses: float
    category_totals: Mapping[Category, float]
    weekly_report: Mapping[Category, Mapping[str, float]]
    available_for_variable: float
    remaining_variable_budget: float
    weekly_allowance: float
    weeks_remaining: int
    goal_comparison: GoalComparison
    goal_progress_percent: float
    available_vs_income_percent: float
    record_count: int
    educational_message: Optional[EducationalMessage] = None
    goal_set: bool = False

    # the read-only mappings below are not hashable
    __hash__ = None

    def __post_init__(self):
        object.__setattr__(self, "category_totals", _frozen(self.category_totals))
        object.__setattr__(
            self,
            "weekly_report",
            _frozen({cat: _frozen(cells) for cat, cells in self.weekly_report.items()}),
        )

    def week_total(self, label: str) -> float:
        return sum(cells.get(label, 0.0) for cells in self.weekly_report.values())
