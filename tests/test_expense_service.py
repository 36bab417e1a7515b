import sqlite3
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from models.errors import NotFoundError, StoreError, ValidationError
from models.expense import ExpenseDraft
from models.filter_criteria import FilterCriteria
from models.view_state import Empty, Error, ExportReady, Success
from services.expense_service import ExpenseService

NOW = datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def service(db, expense_dao, category_dao):
    return ExpenseService(expense_dao, category_dao, db.changes)


def _draft(category, amount="10.00", day=1, description="note"):
    return ExpenseDraft(amount=amount, category_id=category.id,
                        date=datetime(2024, 6, day, 9, 0), description=description)


def test_add_expense_stamps_times(service, category_dao):
    food = category_dao.get_by_name("Food")
    result = service.add_expense(_draft(food, "12.34", description="  Lunch  "), now=NOW)
    assert result.ok

    stored = service.get_expense(result.value)
    assert stored.amount == Decimal("12.34")
    assert stored.description == "Lunch"
    assert stored.created_at == stored.updated_at == NOW


def test_stored_amount_never_has_more_than_two_places(service, category_dao):
    food = category_dao.get_by_name("Food")
    assert not service.add_expense(_draft(food, "1E-3"), now=NOW).ok
    assert service.get_all().items == []

    expense_id = service.add_expense(_draft(food, "1.50e1"), now=NOW).value
    stored = service.get_expense(expense_id)
    assert stored.amount == Decimal("15")
    assert stored.amount.as_tuple().exponent >= -2


def test_missing_description_is_stored_blank(service, category_dao):
    food = category_dao.get_by_name("Food")
    expense_id = service.add_expense(_draft(food, description=None), now=NOW).value
    assert service.get_expense(expense_id).description == ""

    result = service.update_expense(expense_id, _draft(food, "8", description=None), now=NOW)
    assert result.ok
    assert result.value.description == ""


def test_add_expense_rejects_invalid_and_unknown_category(service, category_dao):
    invalid = service.add_expense(ExpenseDraft(amount="-1"), now=NOW)
    assert isinstance(invalid.error, ValidationError)
    assert set(invalid.error.field_errors) == {"amount", "category", "date"}

    ghost = service.add_expense(
        ExpenseDraft(amount="5", category_id=4242, date=NOW), now=NOW)
    assert isinstance(ghost.error, NotFoundError)


def test_update_keeps_created_at(service, category_dao):
    food = category_dao.get_by_name("Food")
    transport = category_dao.get_by_name("Transport")
    expense_id = service.add_expense(_draft(food), now=NOW).value

    later = NOW + timedelta(hours=3)
    result = service.update_expense(expense_id, _draft(transport, "20", day=2), now=later)
    assert result.ok
    assert result.value.category_id == transport.id
    assert result.value.amount == Decimal("20")
    assert result.value.created_at == NOW
    assert result.value.updated_at == later

    missing = service.update_expense(9999, _draft(food), now=NOW)
    assert isinstance(missing.error, NotFoundError)


def test_delete_expense(service, category_dao):
    food = category_dao.get_by_name("Food")
    expense_id = service.add_expense(_draft(food), now=NOW).value
    assert service.delete_expense(expense_id).ok
    assert service.get_expense(expense_id) is None
    assert isinstance(service.delete_expense(expense_id).error, NotFoundError)


def test_reads_are_joined_and_newest_first(service, category_dao):
    food = category_dao.get_by_name("Food")
    transport = category_dao.get_by_name("Transport")
    service.add_expense(_draft(food, day=1), now=NOW)
    service.add_expense(_draft(transport, day=3), now=NOW)
    service.add_expense(_draft(food, day=2), now=NOW)

    result = service.get_all()
    assert not result.failed
    assert [e.date.day for e in result.items] == [3, 2, 1]
    assert result.items[0].category.name == "Transport"

    assert len(service.get_by_category(food.id).items) == 2
    ranged = service.get_by_date_range(datetime(2024, 6, 2), datetime(2024, 6, 3, 9, 0))
    assert [e.date.day for e in ranged.items] == [3, 2]


def test_read_failure_is_empty_with_error(service, monkeypatch, expense_dao):
    def broken():
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(expense_dao, "get_all", broken)
    result = service.get_all()
    assert result.failed
    assert result.items == []
    assert isinstance(result.error, StoreError)

    state = service.load_list(FilterCriteria())
    assert isinstance(state, Error)
    assert "database is locked" in state.message


def test_unresolved_rows_are_dropped_and_counted(db, service, category_dao):
    food = category_dao.get_by_name("Food")
    keep = service.add_expense(_draft(food, day=1), now=NOW).value
    orphan = service.add_expense(_draft(food, day=2), now=NOW).value
    conn = db.get_connection()
    conn.execute("PRAGMA foreign_keys = OFF")
    conn.execute("UPDATE expenses SET category_id = 777 WHERE id = ?", (orphan,))
    conn.commit()
    conn.execute("PRAGMA foreign_keys = ON")

    result = service.get_all()
    assert [e.id for e in result.items] == [keep]
    assert result.dropped == 1


def test_load_list_states(service, category_dao):
    food = category_dao.get_by_name("Food")
    transport = category_dao.get_by_name("Transport")

    assert service.load_list() == Empty(filtered=False)
    service.add_expense(_draft(food), now=NOW)

    state = service.load_list(FilterCriteria(category_ids={food.id}))
    assert isinstance(state, Success)
    assert state.active_filters.category_ids == {food.id}

    filtered = service.load_list(FilterCriteria(category_ids={transport.id}))
    assert filtered == Empty(filtered=True)
    assert filtered.message.startswith("No expenses match your filters.")


def test_load_page_filters_each_page(service, category_dao):
    food = category_dao.get_by_name("Food")
    transport = category_dao.get_by_name("Transport")
    for day in range(1, 7):
        service.add_expense(_draft(food if day % 2 else transport, day=day), now=NOW)

    page = service.load_page(FilterCriteria(category_ids={food.id}), 0, 4)
    assert [e.date.day for e in page.items] == [5, 3]
    assert page.next_key == 1


def test_observe_list_emits_now_and_after_each_write(service, category_dao):
    food = category_dao.get_by_name("Food")
    states = []
    unsubscribe = service.observe_list(FilterCriteria(), states.append)
    assert states == [Empty(filtered=False)]

    expense_id = service.add_expense(_draft(food), now=NOW).value
    assert isinstance(states[-1], Success)
    assert [e.id for e in states[-1].expenses] == [expense_id]

    service.delete_expense(expense_id)
    assert states[-1] == Empty(filtered=False)

    unsubscribe()
    service.add_expense(_draft(food), now=NOW)
    assert len(states) == 3


def test_export(service, category_dao, tmp_path):
    assert isinstance(service.export_csv(), Error)

    food = category_dao.get_by_name("Food")
    service.add_expense(_draft(food, "3.5", description="Tea, biscuits"), now=NOW)
    state = service.export_csv()
    assert isinstance(state, ExportReady)
    assert state.row_count == 1
    assert '"Tea, biscuits"' in state.csv_content

    path = tmp_path / "out.csv"
    assert service.write_export(str(path), state.csv_content).ok
    assert path.read_text(encoding="utf-8") == state.csv_content

    bad = service.write_export(str(tmp_path / "missing" / "out.csv"), state.csv_content)
    assert not bad.ok
