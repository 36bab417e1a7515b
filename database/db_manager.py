import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

from database.change_feed import ChangeFeed
from utils.constants import DB_FILE, DEFAULT_CATEGORIES, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None
        self.write_lock = threading.RLock()
        self.changes = ChangeFeed()

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema, default settings and (once) the default categories."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_settings(conn)
        conn.commit()
        self._seed_categories(conn)

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS categories (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                name        TEXT    NOT NULL UNIQUE,
                icon        TEXT    NOT NULL DEFAULT '📦',
                color_hex   TEXT    NOT NULL DEFAULT '#B19CD9',
                is_custom   INTEGER NOT NULL DEFAULT 0,
                sort_order  INTEGER NOT NULL DEFAULT 999
            );

            CREATE TABLE IF NOT EXISTS expenses (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                amount      REAL    NOT NULL CHECK(amount > 0),
                category_id INTEGER NOT NULL REFERENCES categories(id) ON DELETE RESTRICT,
                date        TEXT    NOT NULL,
                description TEXT    NOT NULL DEFAULT '',
                created_at  TEXT    NOT NULL,
                updated_at  TEXT    NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_expenses_date        ON expenses(date);
            CREATE INDEX IF NOT EXISTS idx_expenses_category_id ON expenses(category_id);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_settings(self, conn: sqlite3.Connection):
        for key, value in DEFAULT_SETTINGS:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def _seed_categories(self, conn: sqlite3.Connection):
        """First-run only; a user who deletes a default does not get it back."""
        if self.get_setting("categories_seeded") == "1":
            return
        try:
            for cat in DEFAULT_CATEGORIES:
                conn.execute(
                    """INSERT OR IGNORE INTO categories(name, icon, color_hex, is_custom, sort_order)
                       VALUES (?, ?, ?, 0, ?)""",
                    (cat["name"], cat["icon"], cat["color_hex"], cat["sort_order"]),
                )
            conn.execute(
                "INSERT OR REPLACE INTO app_settings(key, value) VALUES ('categories_seeded', '1')"
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            logger.exception("Failed to seed default categories")
            return
        logger.info("Seeded %d default categories", len(DEFAULT_CATEGORIES))

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        with self.write_lock:
            conn.execute(
                "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )
            conn.commit()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a read-then-write sequence under one write lock.

        BEGIN IMMEDIATE takes SQLite's reserved lock up front, so no other
        connection can write between the read and the write. Writers on this
        connection (the DAOs' single statements, settings) hold write_lock too,
        so they wait for the transaction instead of joining it.
        """
        with self.write_lock:
            conn = self.get_connection()
            if conn.in_transaction:
                conn.commit()
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            else:
                conn.commit()

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the DB in db_folder or CWD."""
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        db = DatabaseManager(path)
        db.initialize()
        logger.info("Opened database %s", path)
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
