import logging
import sqlite3
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from models.errors import StoreError
from models.filter_criteria import FilterCriteria
from models.page import Page, PagingState
from services.expense_pager import ExpensePager

START = datetime(2024, 1, 1, 9, 0)


def _seed(expense_dao, category_dao, count):
    """count expenses one day apart, alternating Food and Transport."""
    food = category_dao.get_by_name("Food")
    transport = category_dao.get_by_name("Transport")
    ids = []
    for i in range(count):
        cat = food if i % 2 == 0 else transport
        expense = expense_dao.create(Decimal(f"{i + 1}.25"), cat.id, START + timedelta(days=i))
        ids.append(expense.id)
    return ids


def _walk(pager, page_size, criteria=None):
    return list(pager.iter_pages(page_size, criteria))


def test_first_page_is_newest_first(expense_dao, category_dao):
    ids = _seed(expense_dao, category_dao, 5)
    page = ExpensePager(expense_dao, category_dao).load_page(0, 3)

    assert [e.id for e in page.items] == list(reversed(ids))[:3]
    assert page.prev_key is None
    assert page.next_key == 1


def test_keys_for_middle_and_past_the_end(expense_dao, category_dao):
    _seed(expense_dao, category_dao, 5)
    pager = ExpensePager(expense_dao, category_dao)

    second = pager.load_page(1, 3)
    assert len(second.items) == 2
    assert (second.prev_key, second.next_key) == (0, 2)

    beyond = pager.load_page(2, 3)
    assert beyond.items == []
    assert (beyond.prev_key, beyond.next_key) == (1, None)


def test_pages_cover_every_expense_once(expense_dao, category_dao):
    ids = _seed(expense_dao, category_dao, 23)
    pager = ExpensePager(expense_dao, category_dao)

    for size in (1, 4, 7, 20, 50):
        seen = [e.id for p in _walk(pager, size) for e in p.items]
        assert sorted(seen) == sorted(ids)
        assert len(seen) == len(set(seen))


def test_filtered_pages_match_filtered_list(expense_dao, category_dao):
    _seed(expense_dao, category_dao, 15)
    transport = category_dao.get_by_name("Transport")
    criteria = FilterCriteria(category_ids={transport.id})
    pager = ExpensePager(expense_dao, category_dao)

    paged = [e.id for p in _walk(pager, 4, criteria) for e in p.items]
    expected = [e.id for e in expense_dao.get_all() if e.category_id == transport.id]
    assert paged == expected


def test_rows_with_missing_category_are_dropped(db, expense_dao, category_dao, caplog):
    ids = _seed(expense_dao, category_dao, 3)
    conn = db.get_connection()
    conn.execute("PRAGMA foreign_keys = OFF")
    conn.execute("UPDATE expenses SET category_id = 999 WHERE id = ?", (ids[1],))
    conn.commit()
    conn.execute("PRAGMA foreign_keys = ON")

    with caplog.at_level(logging.WARNING, logger="services.expense_pager"):
        page = ExpensePager(expense_dao, category_dao).load_page(0, 10)

    assert [e.id for e in page.items] == [ids[2], ids[0]]
    assert "category 999 not found" in caplog.text


def test_store_failure_raises_and_can_be_retried(expense_dao, category_dao, monkeypatch):
    _seed(expense_dao, category_dao, 4)
    pager = ExpensePager(expense_dao, category_dao)
    real_get_page = expense_dao.get_page

    def broken(limit, offset):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(expense_dao, "get_page", broken)
    with pytest.raises(StoreError):
        pager.load_page(0, 2)

    monkeypatch.setattr(expense_dao, "get_page", real_get_page)
    assert len(pager.load_page(0, 2).items) == 2


def test_invalid_request_rejected(expense_dao, category_dao):
    pager = ExpensePager(expense_dao, category_dao)
    with pytest.raises(ValueError):
        pager.load_page(-1, 10)
    with pytest.raises(ValueError):
        pager.load_page(0, 0)


def test_concurrent_loads_agree(expense_dao, category_dao):
    _seed(expense_dao, category_dao, 30)
    pager = ExpensePager(expense_dao, category_dao)
    expected = [[e.id for e in pager.load_page(i, 5).items] for i in range(6)]

    with ThreadPoolExecutor(max_workers=6) as pool:
        pages = list(pool.map(lambda i: pager.load_page(i, 5), range(6)))

    assert [[e.id for e in p.items] for p in pages] == expected


def test_refresh_key():
    def page(prev_key, next_key, n=3):
        return Page(items=[object()] * n, prev_key=prev_key, next_key=next_key)

    assert ExpensePager.get_refresh_key(PagingState()) is None
    assert ExpensePager.get_refresh_key(PagingState(pages=[page(None, 1)])) is None

    pages = [page(None, 1), page(0, 2), page(1, 3)]
    assert ExpensePager.get_refresh_key(PagingState(pages, anchor_position=0)) == 0
    assert ExpensePager.get_refresh_key(PagingState(pages, anchor_position=4)) == 1
    assert ExpensePager.get_refresh_key(PagingState(pages, anchor_position=8)) == 2
    # past the end falls back to the last page
    assert ExpensePager.get_refresh_key(PagingState(pages, anchor_position=99)) == 2

    lone = PagingState([page(None, None)], anchor_position=0)
    assert ExpensePager.get_refresh_key(lone) is None
