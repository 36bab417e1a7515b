import logging

import customtkinter as ctk

from database.change_feed import CATEGORIES, EXPENSES
from database.db_manager import DatabaseManager
from services.category_service import CategoryService
from services.expense_service import ExpenseService
from services.summary_service import SummaryService
from ui.tabs.categories_tab import CategoriesTab
from ui.tabs.expenses_tab import ExpensesTab
from ui.tabs.settings_tab import SettingsTab
from ui.tabs.summary_tab import SummaryTab
from utils.constants import APP_HEIGHT, APP_NAME, APP_WIDTH, DEFAULT_PAGE_SIZE
from utils.currency import Currency

logger = logging.getLogger(__name__)

_REFRESH_SCOPES: dict[str, set[str]] = {
    EXPENSES:   {"expenses", "summary"},
    CATEGORIES: {"expenses", "summary", "categories"},
    "full":     {"expenses", "summary", "categories", "settings"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        db: DatabaseManager,
        expense_service: ExpenseService,
        category_service: CategoryService,
        summary_service: SummaryService,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._db = db
        self._expense_svc = expense_service
        self._cat_svc = category_service
        self._summary_svc = summary_service
        self._pending_scopes: set[str] = set()

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        self._load_preferences()
        self._build_tabs()

        self._unsubscribe = db.changes.subscribe(self._on_store_changed)

    def _load_preferences(self):
        self._currency = Currency.from_code(self._db.get_setting("currency", Currency.INR.code))
        self._date_format = self._db.get_setting("date_format", "YYYY-MM-DD")
        try:
            self._page_size = int(self._db.get_setting("page_size", str(DEFAULT_PAGE_SIZE)))
        except ValueError:
            logger.warning("Ignoring invalid page_size setting")
            self._page_size = DEFAULT_PAGE_SIZE

    def get_currency(self) -> Currency:
        return self._currency

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=0, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Expenses", "Summary", "Categories", "Settings"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._expenses_tab = ExpensesTab(
            self._tabview.tab("Expenses"),
            expense_service=self._expense_svc,
            category_service=self._cat_svc,
            get_currency=self.get_currency,
            date_format=self._date_format,
            page_size=self._page_size,
        )
        self._expenses_tab.grid(row=0, column=0, sticky="nsew")

        self._summary_tab = SummaryTab(
            self._tabview.tab("Summary"),
            summary_service=self._summary_svc,
            get_currency=self.get_currency,
        )
        self._summary_tab.grid(row=0, column=0, sticky="nsew")

        self._categories_tab = CategoriesTab(
            self._tabview.tab("Categories"),
            category_service=self._cat_svc,
        )
        self._categories_tab.grid(row=0, column=0, sticky="nsew")

        self._settings_tab = SettingsTab(
            self._tabview.tab("Settings"),
            db=self._db,
            expense_service=self._expense_svc,
            on_settings_changed=self._on_settings_changed,
        )
        self._settings_tab.grid(row=0, column=0, sticky="nsew")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def _on_store_changed(self, topic: str):
        # may arrive off the Tk thread; coalesce and hop onto the event loop
        first = not self._pending_scopes
        self._pending_scopes.add(topic)
        if first:
            self.after(0, self._flush_refresh)

    def _flush_refresh(self):
        scopes, self._pending_scopes = self._pending_scopes, set()
        tabs: set[str] = set()
        for scope in scopes:
            tabs |= _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        self._refresh_tabs(tabs)

    def notify_tabs_refresh(self, scope: str = "full"):
        self._refresh_tabs(_REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"]))

    def _refresh_tabs(self, tabs: set[str]):
        if "expenses"   in tabs: self._expenses_tab.refresh()
        if "summary"    in tabs: self._summary_tab.refresh()
        if "categories" in tabs: self._categories_tab.refresh()
        if "settings"   in tabs: self._settings_tab.refresh()

    def _on_settings_changed(self):
        self._load_preferences()
        self._expenses_tab.set_page_size(self._page_size)
        self._expenses_tab.set_date_format(self._date_format)
        self._summary_tab.refresh()

    def close(self):
        self._unsubscribe()
        self._db.close()
        self.destroy()
