from datetime import date, datetime
from typing import Iterable, Optional, Union

from kakebo.aggregate import category_totals, classify, total_value, weekly_report
from kakebo.allowance import goal_value, project_allowance
from kakebo.domain import DashboardSnapshot, Goal, GoalComparison, Record
from kakebo.goals import classify_state, goal_progress_percent
from kakebo.logger import get_logger
from kakebo.weeks import MonthLike, normalize_month, partition_month

logger = get_logger(__name__)


def available_vs_income_percent(available: float, income: float) -> float:
    if income <= 0:
        return 0.0
    return max(0.0, available / income * 100)


def build_dashboard(
    month: MonthLike,
    records: Iterable[Record],
    goal: Optional[Goal],
    today: Union[date, datetime],
) -> DashboardSnapshot:
    """Derive the full dashboard for one (month, records, goal, today) input."""
    month = normalize_month(month)
    records = tuple(records)
    classified = classify(records)
    weeks = partition_month(month)

    income = total_value(classified.income)
    fixed = total_value(classified.fixed_expenses)
    variable = total_value(classified.variable_expenses)
    target = goal_value(goal)
    realized = income - fixed - variable

    projection = project_allowance(month, records, goal, today)
    message = classify_state(month, today, len(records), goal, realized)

    logger.debug(
        "Dashboard %s: %d records, remaining=%.2f over %d weeks, state=%s",
        month, len(records), projection.remaining, projection.weeks_remaining,
        message.state.value if message else None,
    )

    return DashboardSnapshot(
        month=month,
        evaluation_date=projection.evaluation_date,
        weeks=weeks,
        total_income=income,
        total_fixed_expenses=fixed,
        total_variable_expenses=variable,
        category_totals=category_totals(classified.variable_expenses),
        weekly_report=weekly_report(classified.variable_expenses, weeks),
        available_for_variable=projection.available,
        remaining_variable_budget=projection.remaining,
        weekly_allowance=projection.suggestion,
        weeks_remaining=projection.weeks_remaining,
        goal_comparison=GoalComparison(goal=target, realized_savings=realized, difference=realized - target),
        goal_progress_percent=goal_progress_percent(realized, goal),
        available_vs_income_percent=available_vs_income_percent(projection.available, income),
        record_count=len(records),
        educational_message=message,
        goal_set=goal is not None,
    )
