from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from kakebo.dashboard import available_vs_income_percent, build_dashboard
from kakebo.domain import Category, DashboardSnapshot, EducationalState, Goal, Record, RecordClass


def make_rec(id, rc, value, day, category=None):
    return Record(id=id, date=day, value=value, name=f"r{id}", record_class=rc, category=category)


def june_records():
    return (
        make_rec(1, RecordClass.INCOME, 3000, "2025-06-01"),
        make_rec(2, RecordClass.FIXED_EXPENSE, 1000, "2025-06-01"),
        make_rec(3, RecordClass.VARIABLE_EXPENSE, 100, "2025-06-01", Category.NECESSITY),
        make_rec(4, RecordClass.VARIABLE_EXPENSE, 100, "2025-06-03", Category.DESIRE),
        make_rec(5, RecordClass.VARIABLE_EXPENSE, 100, "2025-06-05", Category.CULTURE),
        make_rec(6, RecordClass.VARIABLE_EXPENSE, 100, "2025-06-07", Category.UNEXPECTED),
    )


def test_full_snapshot():
    snap = build_dashboard("2025-06", june_records(), Goal(500, "2025-06"), date(2025, 6, 10))

    assert snap.month == "2025-06"
    assert snap.evaluation_date == date(2025, 6, 10)
    assert len(snap.weeks) == 4
    assert snap.total_income == 3000
    assert snap.total_fixed_expenses == 1000
    assert snap.total_variable_expenses == 400
    assert snap.available_for_variable == 1500
    assert snap.remaining_variable_budget == 1100
    assert snap.weeks_remaining == 3
    assert snap.weekly_allowance == pytest.approx(366.67, abs=0.01)
    assert snap.goal_comparison.goal == 500
    assert snap.goal_comparison.realized_savings == 1600
    assert snap.goal_comparison.difference == 1100
    assert snap.goal_progress_percent == 320
    assert snap.available_vs_income_percent == 50
    assert snap.record_count == 6
    assert snap.goal_set is True
    assert snap.educational_message.state is EducationalState.GOAL_ACHIEVED
    assert snap.educational_message.goal_value == 500


def test_report_and_totals_agree():
    snap = build_dashboard("2025-06", june_records(), None, date(2025, 6, 10))
    for cat in Category:
        assert sum(snap.weekly_report[cat].values()) == snap.category_totals[cat] == 100
    assert snap.week_total("Week 1 (01-07)") == 400
    assert snap.week_total("Week 2 (08-14)") == 0


def test_overspent_without_goal():
    records = (
        make_rec(1, RecordClass.INCOME, 1000, "2025-06-01"),
        make_rec(2, RecordClass.FIXED_EXPENSE, 200, "2025-06-01"),
        make_rec(3, RecordClass.VARIABLE_EXPENSE, 900, "2025-06-02", Category.NECESSITY),
    )
    snap = build_dashboard("2025-06", records, None, date(2025, 6, 10))

    assert snap.remaining_variable_budget == -100
    assert snap.weekly_allowance == 0
    assert snap.goal_comparison.realized_savings == -100
    assert snap.goal_progress_percent == 0
    assert snap.available_vs_income_percent == 80
    assert snap.goal_set is False
    assert snap.educational_message is None


def test_empty_month_still_produces_a_dashboard():
    snap = build_dashboard("2025-06", (), None, date(2025, 6, 10))
    assert snap.total_income == 0
    assert snap.weekly_allowance == 0
    assert snap.available_vs_income_percent == 0
    assert snap.goal_progress_percent == 0
    assert set(snap.category_totals) == set(Category)
    assert snap.educational_message is None


def test_single_record_is_first_record_even_if_goal_met():
    records = (make_rec(1, RecordClass.INCOME, 5000, "2025-06-01"),)
    snap = build_dashboard("2025-06", records, Goal(1000, "2025-06"), date(2025, 6, 10))
    assert snap.educational_message.state is EducationalState.FIRST_RECORD


def test_past_month_has_no_message():
    records = (make_rec(1, RecordClass.INCOME, 5000, "2025-06-01"),)
    snap = build_dashboard("2025-06", records, None, date(2025, 8, 10))
    assert snap.educational_message is None
    assert snap.evaluation_date == date(2025, 6, 30)


def test_snapshot_is_immutable():
    snap = build_dashboard("2025-06", june_records(), None, date(2025, 6, 10))
    with pytest.raises(FrozenInstanceError):
        snap.weekly_allowance = 1
    with pytest.raises(TypeError):
        snap.category_totals[Category.DESIRE] = 0
    with pytest.raises(TypeError):
        snap.weekly_report[Category.DESIRE]["Week 1 (01-07)"] = 0


def test_snapshot_is_not_hashable():
    snap = build_dashboard("2025-06", june_records(), None, date(2025, 6, 10))
    assert DashboardSnapshot.__hash__ is None
    with pytest.raises(TypeError):
        hash(snap)


def test_same_inputs_same_snapshot():
    a = build_dashboard("2025-06", june_records(), Goal(500, "2025-06"), date(2025, 6, 10))
    b = build_dashboard((2025, 6), list(june_records()), Goal(500, "2025-06"), date(2025, 6, 10))
    assert a == b


def test_available_vs_income_percent():
    assert available_vs_income_percent(500, 1000) == 50
    assert available_vs_income_percent(-500, 1000) == 0
    assert available_vs_income_percent(500, 0) == 0
