"""Weekly spending allowance.

The allowance is a reprojection, not a ledger: every call starts from the
current totals and the effective evaluation date, so logging a new expense or
looking at a different day changes the answer immediately.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Union

from kakebo.aggregate import classify, total_value
from kakebo.domain import Goal, Record
from kakebo.weeks import MonthLike, as_date, compare_months, first_day, last_day, month_key, partition_month


@dataclass(frozen=True)
class AllowanceProjection:
    available: float
    spent: float
    remaining: float
    evaluation_date: date
    weeks_remaining: int
    suggestion: float


def goal_value(goal: Optional[Goal]) -> float:
    return goal.value if goal is not None else 0.0


def effective_evaluation_date(month: MonthLike, today: Union[date, datetime]) -> date:
    """First day for a future month, last day for a past month, today otherwise."""
    today = as_date(today)
    relation = compare_months(month, month_key(today))
    if relation > 0:
        return first_day(month)
    if relation < 0:
        return last_day(month)
    return today


def weeks_remaining(month: MonthLike, evaluation_date: date) -> int:
    """Buckets not yet concluded, the one containing evaluation_date included."""
    return sum(1 for week in partition_month(month) if week.end_date >= evaluation_date)


def redistribute(remaining: float, weeks_left: int) -> float:
    """Equal share of what is left per open week; everything at once when none are open."""
    if remaining <= 0:
        return 0.0
    if weeks_left <= 0:
        return remaining
    return remaining / weeks_left


def project_allowance(
    month: MonthLike,
    records: Iterable[Record],
    goal: Optional[Goal],
    today: Union[date, datetime],
) -> AllowanceProjection:
    classified = classify(records)
    income = total_value(classified.income)
    fixed = total_value(classified.fixed_expenses)
    spent = total_value(classified.variable_expenses)

    available = income - fixed - goal_value(goal)
    remaining = available - spent
    evaluation_date = effective_evaluation_date(month, today)
    left = weeks_remaining(month, evaluation_date)

    return AllowanceProjection(
        available=available,
        spent=spent,
        remaining=remaining,
        evaluation_date=evaluation_date,
        weeks_remaining=left,
        suggestion=redistribute(remaining, left),
    )


def project_weekly_allowance(
    month: MonthLike,
    records: Iterable[Record],
    goal: Optional[Goal],
    today: Union[date, datetime],
) -> float:
    return project_allowance(month, records, goal, today).suggestion
