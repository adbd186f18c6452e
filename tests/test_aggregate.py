from kakebo.aggregate import category_totals, classify, total_by_class, total_value, weekly_report
from kakebo.domain import Category, Record, RecordClass
from kakebo.weeks import partition_month


def make_rec(id, rc, value, day, category=None):
    return Record(id=id, date=day, value=value, name=f"r{id}", record_class=rc, category=category)


def make_sample():
    return (
        make_rec(1, RecordClass.INCOME, 3000, "2025-06-01"),
        make_rec(2, RecordClass.FIXED_EXPENSE, 1000, "2025-06-01"),
        make_rec(3, RecordClass.VARIABLE_EXPENSE, 100, "2025-06-02", Category.NECESSITY),
        make_rec(4, RecordClass.VARIABLE_EXPENSE, 50, "2025-06-09", Category.DESIRE),
        make_rec(5, RecordClass.VARIABLE_EXPENSE, 25.5, "2025-06-30", Category.NECESSITY),
        make_rec(6, RecordClass.VARIABLE_EXPENSE, 10, "2025-06-21", Category.CULTURE),
    )


def test_classify_partitions_by_class():
    classified = classify(make_sample())
    assert [r.id for r in classified.income] == [1]
    assert [r.id for r in classified.fixed_expenses] == [2]
    assert [r.id for r in classified.variable_expenses] == [3, 4, 5, 6]


def test_totals():
    records = make_sample()
    assert total_by_class(records, RecordClass.INCOME) == 3000
    assert total_by_class(records, RecordClass.FIXED_EXPENSE) == 1000
    assert total_by_class(records, RecordClass.VARIABLE_EXPENSE) == 185.5
    assert total_value(()) == 0
    assert total_by_class((), RecordClass.INCOME) == 0


def test_category_totals_seeded_with_every_category():
    totals = category_totals(classify(make_sample()).variable_expenses)
    assert set(totals) == set(Category)
    assert totals[Category.NECESSITY] == 125.5
    assert totals[Category.UNEXPECTED] == 0

    assert category_totals(()) == {cat: 0.0 for cat in Category}


def test_weekly_report_places_records_in_their_week():
    weeks = partition_month("2025-06")
    report = weekly_report(classify(make_sample()).variable_expenses, weeks)

    assert set(report) == set(Category)
    assert all(set(cells) == {w.label for w in weeks} for cells in report.values())
    assert report[Category.NECESSITY]["Week 1 (01-07)"] == 100
    assert report[Category.NECESSITY]["Week 4 (22-30)"] == 25.5
    assert report[Category.DESIRE]["Week 2 (08-14)"] == 50
    assert report[Category.CULTURE]["Week 3 (15-21)"] == 10
    assert report[Category.UNEXPECTED]["Week 1 (01-07)"] == 0


def test_weekly_rows_sum_to_category_totals():
    variable = classify(make_sample()).variable_expenses
    report = weekly_report(variable, partition_month("2025-06"))
    totals = category_totals(variable)
    for cat in Category:
        assert sum(report[cat].values()) == totals[cat]


def test_malformed_records_are_skipped():
    weeks = partition_month("2025-06")
    records = (
        make_rec(1, RecordClass.VARIABLE_EXPENSE, 40, "2025-06-03", None),
        make_rec(2, RecordClass.VARIABLE_EXPENSE, 40, "garbage", Category.DESIRE),
        make_rec(3, RecordClass.VARIABLE_EXPENSE, 40, "2025-07-03", Category.DESIRE),
        make_rec(4, RecordClass.VARIABLE_EXPENSE, 7, "2025-06-03", Category.DESIRE),
    )
    report = weekly_report(records, weeks)
    assert sum(sum(cells.values()) for cells in report.values()) == 7

    totals = category_totals(records)
    assert totals[Category.DESIRE] == 87
    assert sum(totals.values()) == 87
