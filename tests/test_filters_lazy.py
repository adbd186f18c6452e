from datetime import date
from itertools import islice

from kakebo.domain import Category, Record, RecordClass
from kakebo.filters import by_category, by_date_range, by_record_class, in_month
from kakebo.lazy import iter_records, lazy_top_categories, records_in_week
from kakebo.weeks import partition_month


def make_sample():
    return (
        Record(1, "2025-06-01", 3000, "Salary", RecordClass.INCOME),
        Record(2, "2025-06-02", 300, "Groceries", RecordClass.VARIABLE_EXPENSE, Category.NECESSITY),
        Record(3, "2025-06-09", 200, "Bar", RecordClass.VARIABLE_EXPENSE, Category.DESIRE),
        Record(4, "2025-06-10", 700, "Doctor", RecordClass.VARIABLE_EXPENSE, Category.UNEXPECTED),
        Record(5, "2025-07-01", 100, "Cinema", RecordClass.VARIABLE_EXPENSE, Category.CULTURE),
        Record(6, "bad", 50, "Broken", RecordClass.VARIABLE_EXPENSE, Category.DESIRE),
    )


def test_by_record_class_and_category():
    records = make_sample()
    assert [r.id for r in filter(by_record_class(RecordClass.INCOME), records)] == [1]
    assert [r.id for r in filter(by_category(Category.DESIRE), records)] == [3, 6]


def test_by_date_range_is_inclusive_and_skips_bad_dates():
    pred = by_date_range(date(2025, 6, 2), date(2025, 6, 9))
    assert [r.id for r in filter(pred, make_sample())] == [2, 3]


def test_in_month():
    assert [r.id for r in filter(in_month("2025-07"), make_sample())] == [5]


def test_iter_records_is_lazy():
    calls = {"n": 0}

    def pred(r):
        calls["n"] += 1
        return r.record_class is RecordClass.VARIABLE_EXPENSE

    first = list(islice(iter_records(make_sample(), pred), 1))
    assert [r.id for r in first] == [2]
    assert calls["n"] == 2


def test_records_in_week():
    week2 = partition_month("2025-06")[1]
    assert [r.id for r in records_in_week(make_sample(), week2)] == [3, 4]


def test_lazy_top_categories():
    top = list(lazy_top_categories(make_sample(), k=2))
    assert top == [(Category.UNEXPECTED, 700), (Category.NECESSITY, 300)]
    assert len(list(lazy_top_categories(make_sample(), k=10))) == 4
    assert list(lazy_top_categories(make_sample(), k=0)) == []
