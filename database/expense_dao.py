import sqlite3
from datetime import datetime
from decimal import Decimal
from typing import Optional
from database.change_feed import EXPENSES
from database.db_manager import DatabaseManager
from models.expense import Expense
from utils.date_helpers import from_storage, to_storage


class ExpenseDAO:
    """Raw expense rows. Amounts are REAL in SQLite and Decimal in Python."""

    _ORDER = " ORDER BY date DESC, id DESC"

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Expense:
        return Expense(
            id=row["id"],
            amount=Decimal(str(row["amount"])),
            category_id=row["category_id"],
            date=from_storage(row["date"]),
            description=row["description"],
            created_at=from_storage(row["created_at"]),
            updated_at=from_storage(row["updated_at"]),
        )

    def _write(self, sql: str, params) -> sqlite3.Cursor:
        conn = self._db.get_connection()
        with self._db.write_lock:
            try:
                cursor = conn.execute(sql, params)
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise
        if cursor.rowcount:
            self._db.changes.publish(EXPENSES)
        return cursor

    def _fetch(self, sql: str, params=()) -> list[Expense]:
        rows = self._db.get_connection().execute(sql, params).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_all(self) -> list[Expense]:
        return self._fetch("SELECT * FROM expenses" + self._ORDER)

    def get_page(self, limit: int, offset: int) -> list[Expense]:
        return self._fetch(
            "SELECT * FROM expenses" + self._ORDER + " LIMIT ? OFFSET ?",
            (limit, offset),
        )

    def get_by_date_range(self, start: datetime, end: datetime) -> list[Expense]:
        """Both bounds inclusive."""
        return self._fetch(
            "SELECT * FROM expenses WHERE date BETWEEN ? AND ?" + self._ORDER,
            (to_storage(start), to_storage(end)),
        )

    def get_by_category(self, category_id: int) -> list[Expense]:
        return self._fetch(
            "SELECT * FROM expenses WHERE category_id = ?" + self._ORDER,
            (category_id,),
        )

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM expenses WHERE id = ?", (expense_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        amount: Decimal,
        category_id: int,
        date: datetime,
        description: str = "",
        created_at: datetime | None = None,
    ) -> Expense:
        stamp = to_storage(created_at or datetime.now())
        cursor = self._write(
            """INSERT INTO expenses
               (amount, category_id, date, description, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (float(amount), category_id, to_storage(date), description, stamp, stamp),
        )
        return self.get_by_id(cursor.lastrowid)

    def update(self, expense: Expense) -> Optional[Expense]:
        """created_at is never rewritten; updated_at comes from the caller."""
        self._write(
            """UPDATE expenses
               SET amount=?, category_id=?, date=?, description=?, updated_at=?
               WHERE id=?""",
            (float(expense.amount), expense.category_id, to_storage(expense.date),
             expense.description, to_storage(expense.updated_at), expense.id),
        )
        return self.get_by_id(expense.id)

    def delete(self, expense_id: int) -> int:
        cursor = self._write("DELETE FROM expenses WHERE id = ?", (expense_id,))
        return cursor.rowcount
