import logging
import sqlite3
from typing import Iterator, Optional

from database.category_dao import CategoryDAO
from database.expense_dao import ExpenseDAO
from models.category import Category
from models.errors import StoreError
from models.expense import Expense, ExpenseWithCategory
from models.filter_criteria import FilterCriteria
from models.page import Page, PagingState
from services.filter_engine import filter_page
from utils.constants import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)


def join_categories(
    expenses: list[Expense], categories: dict[int, Category]
) -> tuple[list[ExpenseWithCategory], int]:
    """Attach each expense's category. Rows whose category is gone are dropped.

    Returns (joined, dropped_count).
    """
    joined: list[ExpenseWithCategory] = []
    dropped = 0
    for expense in expenses:
        category = categories.get(expense.category_id)
        if category is None:
            dropped += 1
            logger.warning(
                "Dropping expense %s: category %s not found",
                expense.id, expense.category_id,
            )
            continue
        joined.append(ExpenseWithCategory.join(expense, category))
    return joined, dropped


class ExpensePager:
    """Integer-keyed pages over the expense history, newest first.

    Holds no state of its own, so any number of load_page calls can run at
    once and a failed index can simply be requested again.
    """

    def __init__(self, expense_dao: ExpenseDAO, category_dao: CategoryDAO):
        self._expenses = expense_dao
        self._categories = category_dao

    def load_page(self, page_index: int = 0, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
        if page_index < 0 or page_size <= 0:
            raise ValueError(f"Invalid page request: index={page_index} size={page_size}")
        try:
            rows = self._expenses.get_page(page_size, page_index * page_size)
            categories = {c.id: c for c in self._categories.get_all()}
        except sqlite3.Error as exc:
            logger.exception("Failed to load expense page %d", page_index)
            raise StoreError(f"Could not load expenses: {exc}") from exc

        items, _ = join_categories(rows, categories)
        return Page(
            items=items,
            prev_key=None if page_index == 0 else page_index - 1,
            next_key=None if not items else page_index + 1,
        )

    @staticmethod
    def get_refresh_key(state: PagingState) -> Optional[int]:
        """Index to reload from after an invalidation, near the anchor position."""
        if state.anchor_position is None:
            return None
        page = state.closest_page_to_position(state.anchor_position)
        if page is None:
            return None
        if page.prev_key is not None:
            return page.prev_key + 1
        if page.next_key is not None:
            return page.next_key - 1
        return None

    def iter_pages(
        self,
        page_size: int = DEFAULT_PAGE_SIZE,
        criteria: FilterCriteria | None = None,
    ) -> Iterator[Page]:
        """Walk every page from index 0 until next_key is None."""
        key: Optional[int] = 0
        while key is not None:
            page = self.load_page(key, page_size)
            yield filter_page(page, criteria) if criteria else page
            key = page.next_key
