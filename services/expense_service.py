import logging
import sqlite3
from dataclasses import replace
from datetime import datetime
from typing import Callable

from database.category_dao import CategoryDAO
from database.change_feed import ALL_TOPICS, ChangeFeed
from database.expense_dao import ExpenseDAO
from models.errors import ExpenseTrackerError, NotFoundError, StoreError, ValidationError
from models.expense import Expense, ExpenseDraft
from models.filter_criteria import FilterCriteria
from models.page import Page
from models.result import Err, Ok, Result
from models.view_state import (
    Empty, Error, ExportReady, ExportState, ListState, ReadResult, Success,
)
from services.csv_exporter import export_to_csv
from services.expense_pager import ExpensePager, join_categories
from services.filter_engine import apply_filter, filter_page
from services.validation import parse_amount, validate_expense
from utils.constants import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)


class ExpenseService:
    def __init__(self, expense_dao: ExpenseDAO, category_dao: CategoryDAO, changes: ChangeFeed):
        self._dao = expense_dao
        self._category_dao = category_dao
        self._changes = changes
        self.pager = ExpensePager(expense_dao, category_dao)

    # ── Writes ────────────────────────────────────────────────────────────────

    def _check_draft(self, draft: ExpenseDraft, now: datetime) -> ExpenseTrackerError | None:
        result = validate_expense(draft, now)
        if not result.is_valid:
            return ValidationError(result.errors)
        if self._category_dao.get_by_id(draft.category_id) is None:
            return NotFoundError("Category not found")
        return None

    def add_expense(self, draft: ExpenseDraft, now: datetime | None = None) -> Result:
        now = now or datetime.now()
        try:
            error = self._check_draft(draft, now)
            if error:
                return Err(error)
            expense = self._dao.create(
                amount=parse_amount(draft.amount),
                category_id=draft.category_id,
                date=draft.date,
                description=(draft.description or "").strip(),
                created_at=now,
            )
        except sqlite3.Error as exc:
            logger.exception("Failed to add expense")
            return Err(StoreError(f"Could not save expense: {exc}"))
        logger.info("Added expense %s (%s)", expense.id, expense.amount)
        return Ok(expense.id)

    def update_expense(
        self, expense_id: int, draft: ExpenseDraft, now: datetime | None = None
    ) -> Result:
        now = now or datetime.now()
        try:
            existing = self._dao.get_by_id(expense_id)
            if existing is None:
                return Err(NotFoundError("Expense not found"))
            error = self._check_draft(draft, now)
            if error:
                return Err(error)
            updated = self._dao.update(replace(
                existing,
                amount=parse_amount(draft.amount),
                category_id=draft.category_id,
                date=draft.date,
                description=(draft.description or "").strip(),
                updated_at=now,
            ))
        except sqlite3.Error as exc:
            logger.exception("Failed to update expense %s", expense_id)
            return Err(StoreError(f"Could not save expense: {exc}"))
        return Ok(updated)

    def delete_expense(self, expense_id: int) -> Result:
        try:
            deleted = self._dao.delete(expense_id)
        except sqlite3.Error as exc:
            logger.exception("Failed to delete expense %s", expense_id)
            return Err(StoreError(f"Could not delete expense: {exc}"))
        if not deleted:
            return Err(NotFoundError("Expense not found"))
        logger.info("Deleted expense %s", expense_id)
        return Ok()

    # ── Reads ─────────────────────────────────────────────────────────────────

    def get_expense(self, expense_id: int) -> Expense | None:
        try:
            return self._dao.get_by_id(expense_id)
        except sqlite3.Error as exc:
            logger.exception("Failed to read expense %s", expense_id)
            raise StoreError(f"Could not load expense: {exc}") from exc

    def _read(self, fetch: Callable[[], list[Expense]]) -> ReadResult:
        try:
            rows = fetch()
            categories = {c.id: c for c in self._category_dao.get_all()}
        except sqlite3.Error as exc:
            logger.exception("Failed to read expenses")
            return ReadResult(error=StoreError(f"Could not load expenses: {exc}"))
        items, dropped = join_categories(rows, categories)
        return ReadResult(items=items, dropped=dropped)

    def get_all(self) -> ReadResult:
        return self._read(self._dao.get_all)

    def get_by_date_range(self, start: datetime, end: datetime) -> ReadResult:
        return self._read(lambda: self._dao.get_by_date_range(start, end))

    def get_by_category(self, category_id: int) -> ReadResult:
        return self._read(lambda: self._dao.get_by_category(category_id))

    def get_filtered(self, criteria: FilterCriteria) -> ReadResult:
        result = self.get_all()
        if result.failed:
            return result
        return replace(result, items=apply_filter(result.items, criteria))

    def load_list(self, criteria: FilterCriteria | None = None) -> ListState:
        criteria = criteria or FilterCriteria()
        result = self.get_filtered(criteria)
        if result.failed:
            return Error(result.error.message)
        if not result.items:
            return Empty(filtered=criteria.is_active)
        return Success(result.items, criteria)

    def load_page(
        self,
        criteria: FilterCriteria | None = None,
        page_index: int = 0,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page:
        """Raises StoreError; the same index may be retried."""
        page = self.pager.load_page(page_index, page_size)
        return filter_page(page, criteria) if criteria else page

    def observe_list(
        self, criteria: FilterCriteria | None, callback: Callable[[ListState], None]
    ) -> Callable[[], None]:
        """Emit the list state now and again after every store change.

        Returns the unsubscribe function.
        """
        callback(self.load_list(criteria))
        return self._changes.subscribe(
            lambda _topic: callback(self.load_list(criteria)), ALL_TOPICS
        )

    # ── Export ────────────────────────────────────────────────────────────────

    def export_csv(self) -> ExportState:
        result = self.get_all()
        if result.failed:
            return Error(result.error.message)
        if not result.items:
            return Error("No expenses to export")
        return ExportReady(export_to_csv(result.items), len(result.items))

    def write_export(self, path: str, content: str) -> Result:
        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as exc:
            logger.exception("Failed to write export to %s", path)
            return Err(ExpenseTrackerError(f"Could not write file: {exc}", code="io"))
        logger.info("Exported expenses to %s", path)
        return Ok(path)
