import logging
from datetime import datetime
from decimal import Decimal

from database.change_feed import CATEGORIES, EXPENSES, ChangeFeed


def test_publish_reaches_matching_subscribers():
    feed = ChangeFeed()
    everything, expenses_only = [], []
    feed.subscribe(everything.append)
    feed.subscribe(expenses_only.append, topics={EXPENSES})

    feed.publish(EXPENSES)
    feed.publish(CATEGORIES)

    assert everything == [EXPENSES, CATEGORIES]
    assert expenses_only == [EXPENSES]


def test_unsubscribe_stops_delivery():
    feed = ChangeFeed()
    seen = []
    unsubscribe = feed.subscribe(seen.append)
    assert feed.subscriber_count == 1

    unsubscribe()
    unsubscribe()
    feed.publish(EXPENSES)
    assert seen == []
    assert feed.subscriber_count == 0


def test_failing_subscriber_is_logged_and_skipped(caplog):
    feed = ChangeFeed()
    seen = []

    def explode(topic):
        raise RuntimeError("boom")

    feed.subscribe(explode)
    feed.subscribe(seen.append)
    with caplog.at_level(logging.ERROR, logger="database.change_feed"):
        feed.publish(CATEGORIES)

    assert seen == [CATEGORIES]
    assert "Change subscriber failed" in caplog.text


def test_daos_publish_after_commit(db, category_dao, expense_dao):
    topics = []
    db.changes.subscribe(topics.append)

    cat = category_dao.create("Pets", "🐶", "#123456")
    expense = expense_dao.create(Decimal("4.20"), cat.id, datetime(2024, 2, 2))
    expense_dao.delete(expense.id)
    category_dao.delete(cat.id)

    assert topics == [CATEGORIES, EXPENSES, EXPENSES, CATEGORIES]


def test_no_publish_when_nothing_was_deleted(db, category_dao, expense_dao):
    topics = []
    db.changes.subscribe(topics.append)
    expense_dao.delete(31337)
    category_dao.delete(31337)
    assert topics == []
