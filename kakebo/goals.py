from datetime import date, datetime
from typing import Optional, Union

from kakebo.domain import EducationalMessage, EducationalState, Goal
from kakebo.weeks import MonthLike, as_date, compare_months, month_key

GOAL_NEAR_PERCENT = 80.0


def goal_progress_percent(realized_savings: float, goal: Optional[Goal]) -> float:
    """Savings as a percentage of the goal, never negative.

    Without a positive goal the answer is 100 when anything was saved, else 0.
    """
    target = goal.value if goal is not None else 0.0
    if target > 0:
        return max(0.0, realized_savings / target * 100)
    return 100.0 if realized_savings > 0 else 0.0


def classify_state(
    month: MonthLike,
    today: Union[date, datetime],
    record_count: int,
    goal: Optional[Goal],
    realized_savings: float,
) -> Optional[EducationalMessage]:
    """Pick at most one educational state; the first matching rule wins."""
    if compare_months(month, month_key(as_date(today))) < 0:
        return None

    if record_count == 1:
        return EducationalMessage(EducationalState.FIRST_RECORD)

    if goal is None or goal.value <= 0:
        return None

    if realized_savings >= goal.value:
        return EducationalMessage(EducationalState.GOAL_ACHIEVED, goal_value=goal.value)

    if goal_progress_percent(realized_savings, goal) >= GOAL_NEAR_PERCENT:
        return EducationalMessage(EducationalState.GOAL_NEAR, goal_value=goal.value)

    return None
