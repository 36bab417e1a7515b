import sqlite3
from typing import Optional
from database.change_feed import CATEGORIES
from database.db_manager import DatabaseManager
from models.category import Category
from models.errors import ConflictError


class CategoryDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db
        self._all_cache: list | None = None

    def _invalidate_cache(self):
        self._all_cache = None

    def _changed(self):
        self._invalidate_cache()
        self._db.changes.publish(CATEGORIES)

    def _row_to_model(self, row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            icon=row["icon"],
            color_hex=row["color_hex"],
            is_custom=bool(row["is_custom"]),
            sort_order=row["sort_order"],
        )

    def get_all(self) -> list[Category]:
        if self._all_cache is None:
            conn = self._db.get_connection()
            rows = conn.execute(
                "SELECT * FROM categories ORDER BY sort_order, id"
            ).fetchall()
            self._all_cache = [self._row_to_model(r) for r in rows]
        return list(self._all_cache)

    def get_by_id(self, category_id: int) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_name(self, name: str) -> Optional[Category]:
        """Exact, case-sensitive match."""
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE name = ?", (name,)
        ).fetchone()
        return self._row_to_model(row) if row else None

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
            self._changed()
        return cursor

    def create(
        self,
        name: str,
        icon: str,
        color_hex: str,
        is_custom: bool = True,
        sort_order: int = 999,
    ) -> Category:
        cursor = self._write(
            """INSERT INTO categories(name, icon, color_hex, is_custom, sort_order)
               VALUES (?, ?, ?, ?, ?)""",
            (name, icon, color_hex, int(is_custom), sort_order),
        )
        return self.get_by_id(cursor.lastrowid)

    def update(self, category: Category) -> Optional[Category]:
        self._write(
            """UPDATE categories
               SET name=?, icon=?, color_hex=?, is_custom=?, sort_order=?
               WHERE id=?""",
            (category.name, category.icon, category.color_hex,
             int(category.is_custom), category.sort_order, category.id),
        )
        return self.get_by_id(category.id)

    def count_expenses(self, category_id: int) -> int:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT COUNT(*) AS n FROM expenses WHERE category_id = ?", (category_id,)
        ).fetchone()
        return row["n"]

    def delete(self, category_id: int) -> int:
        """Delete only if no expense references it. Returns rows deleted (0 or 1).

        The count and the delete share one write transaction; the foreign key's
        ON DELETE RESTRICT rejects anything that slips past the count.
        """
        with self._db.transaction() as conn:
            in_use = conn.execute(
                "SELECT COUNT(*) AS n FROM expenses WHERE category_id = ?", (category_id,)
            ).fetchone()["n"]
            if in_use:
                raise ConflictError(
                    "Cannot delete category with existing expenses", code="in-use"
                )
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            deleted = cursor.rowcount
        if deleted:
            self._changed()
        return deleted
