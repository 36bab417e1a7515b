from datetime import datetime
from decimal import Decimal

from models.category import Category
from models.expense import ExpenseWithCategory
from models.filter_criteria import FilterCriteria
from models.page import Page
from services.filter_engine import apply_filter, filter_page

FOOD = Category(id=1, name="Food", icon="🍔", color_hex="#FF6B6B", sort_order=1)
TRANSPORT = Category(id=2, name="Transport", icon="🚗", color_hex="#4ECDC4", sort_order=2)
FUN = Category(id=3, name="Entertainment", icon="🎬", color_hex="#45B7D1", sort_order=3)


def _record(id_, amount, category, day):
    when = datetime(2024, 6, day, 10, 0)
    return ExpenseWithCategory(
        id=id_, amount=Decimal(amount), category=category, date=when,
        description=f"expense {id_}", created_at=when, updated_at=when,
    )


def _sample():
    return [
        _record(1, "100", FOOD, 1),
        _record(2, "50", FOOD, 5),
        _record(3, "75", TRANSPORT, 10),
        _record(4, "25", FUN, 20),
    ]


def test_empty_criteria_keeps_everything_in_order():
    records = _sample()
    assert apply_filter(records, FilterCriteria()) == records


def test_category_filter_returns_only_transport():
    result = apply_filter(_sample(), FilterCriteria(category_ids={TRANSPORT.id}))
    assert [r.id for r in result] == [3]


def test_date_bounds_are_inclusive():
    criteria = FilterCriteria(
        start_date=datetime(2024, 6, 5, 10, 0),
        end_date=datetime(2024, 6, 10, 10, 0),
    )
    assert [r.id for r in apply_filter(_sample(), criteria)] == [2, 3]


def test_open_ended_ranges():
    after = FilterCriteria(start_date=datetime(2024, 6, 10))
    before = FilterCriteria(end_date=datetime(2024, 6, 10))
    assert [r.id for r in apply_filter(_sample(), after)] == [3, 4]
    assert [r.id for r in apply_filter(_sample(), before)] == [1, 2]


def test_combined_criteria_and_no_matches():
    criteria = FilterCriteria(start_date=datetime(2024, 6, 2), category_ids={FOOD.id, FUN.id})
    assert [r.id for r in apply_filter(_sample(), criteria)] == [2, 4]
    assert apply_filter(_sample(), FilterCriteria(category_ids={99})) == []


def test_filter_is_idempotent():
    for criteria in (
        FilterCriteria(),
        FilterCriteria(category_ids={FOOD.id}),
        FilterCriteria(start_date=datetime(2024, 6, 3), end_date=datetime(2024, 6, 15)),
    ):
        once = apply_filter(_sample(), criteria)
        assert apply_filter(once, criteria) == once


def test_filter_page_keeps_keys():
    page = Page(items=_sample(), prev_key=2, next_key=4)
    filtered = filter_page(page, FilterCriteria(category_ids={TRANSPORT.id}))
    assert [r.id for r in filtered.items] == [3]
    assert (filtered.prev_key, filtered.next_key) == (2, 4)

    emptied = filter_page(page, FilterCriteria(category_ids={99}))
    assert emptied.items == []
    assert emptied.next_key == 4


def test_criteria_counts_active_restrictions():
    assert FilterCriteria().active_count == 0
    assert not FilterCriteria().is_active
    assert FilterCriteria(end_date=datetime(2024, 1, 1)).active_count == 1
    both = FilterCriteria(start_date=datetime(2024, 1, 1), category_ids=[1, 2])
    assert both.active_count == 2
    assert both.category_ids == frozenset({1, 2})
