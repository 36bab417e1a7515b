import pytest

from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.expense_dao import ExpenseDAO


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "expenses.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def category_dao(db):
    return CategoryDAO(db)


@pytest.fixture
def expense_dao(db):
    return ExpenseDAO(db)
