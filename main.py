import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.category_dao import CategoryDAO
from database.expense_dao import ExpenseDAO

from services.category_service import CategoryService
from services.expense_service import ExpenseService
from services.summary_service import SummaryService

from ui.app_window import AppWindow
from utils.app_config import get_db_folder, get_log_level
from utils.log_config import configure_logging

logger = logging.getLogger(__name__)


def main():
    # ── Bootstrap: logging and DB folder from pre-DB config ──────────────────
    configure_logging(get_log_level())
    db_folder = get_db_folder()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=db_folder)

    # ── DAOs ─────────────────────────────────────────────────────────────────
    category_dao = CategoryDAO(db)
    expense_dao = ExpenseDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    category_svc = CategoryService(category_dao)
    expense_svc = ExpenseService(expense_dao, category_dao, db.changes)
    summary_svc = SummaryService(expense_svc)

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        db=db,
        expense_service=expense_svc,
        category_service=category_svc,
        summary_service=summary_svc,
    )
    app.protocol("WM_DELETE_WINDOW", app.close)
    logger.info("Starting UI")
    app.mainloop()


if __name__ == "__main__":
    main()
