import logging

import customtkinter as ctk

from models.errors import StoreError
from models.expense import ExpenseWithCategory
from models.filter_criteria import FilterCriteria
from models.page import PagingState
from models.view_state import Empty
from services.category_service import CategoryService
from services.expense_pager import ExpensePager
from services.expense_service import ExpenseService
from ui.components.alert_banner import show_banner
from ui.components.confirm_dialog import confirm
from ui.components.expense_form import ExpenseForm
from ui.components.filter_dialog import FilterDialog
from utils.constants import DEFAULT_PAGE_SIZE, ERROR_COLOR
from utils.currency import Currency, format_currency
from utils.date_helpers import format_display_date

logger = logging.getLogger(__name__)


class ExpensesTab(ctk.CTkFrame):
    """Newest-first expense list, loaded a page at a time."""

    def __init__(
        self,
        master,
        expense_service: ExpenseService,
        category_service: CategoryService,
        get_currency,       # callable -> Currency
        date_format: str = "YYYY-MM-DD",
        page_size: int = DEFAULT_PAGE_SIZE,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = expense_service
        self._cat_svc = category_service
        self._get_currency = get_currency
        self._date_format = date_format
        self._page_size = page_size

        self._criteria = FilterCriteria()
        self._state = PagingState()
        self._next_key: int | None = 0

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._build_filter_bar()
        self._banner_area = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_area.grid(row=1, column=0, sticky="ew", padx=8)
        self._build_header()
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=3, column=0, sticky="nsew", padx=8, pady=(0, 8))
        self._scroll.grid_columnconfigure(0, weight=1)

        self._reload(through_key=0)

    def set_page_size(self, page_size: int):
        # page keys are only meaningful for one size; start over from the top
        if page_size != self._page_size:
            self._page_size = page_size
            self._state = PagingState()

    def set_date_format(self, date_format: str):
        self._date_format = date_format
        self.refresh()

    def refresh(self):
        """Reload everything up to the page the user had scrolled to."""
        shown = sum(len(p.items) for p in self._state.pages)
        self._state.anchor_position = max(shown - 1, 0) if self._state.pages else None
        key = ExpensePager.get_refresh_key(self._state)
        self._reload(through_key=key or 0)

    # ── Filter bar ───────────────────────────────────────────────────────────
    def _build_filter_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        bar.grid_columnconfigure(2, weight=1)

        ctk.CTkButton(bar, text="Filter...", width=90, command=self._open_filter).grid(
            row=0, column=0, padx=(8, 4), pady=6)
        self._clear_btn = ctk.CTkButton(
            bar, text="Clear", width=70, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self._clear_filter,
        )
        self._clear_btn.grid(row=0, column=1, padx=4)
        self._filter_label = ctk.CTkLabel(bar, text="", text_color="gray60", anchor="w")
        self._filter_label.grid(row=0, column=2, padx=8, sticky="w")

        ctk.CTkButton(bar, text="+ Add Expense", width=120, command=self._open_add).grid(
            row=0, column=3, padx=8)
        self._update_filter_label()

    def _update_filter_label(self):
        n = self._criteria.active_count
        self._filter_label.configure(text=f"{n} filter{'s' if n != 1 else ''} active" if n else "")
        self._clear_btn.configure(state="normal" if n else "disabled")

    def _open_filter(self):
        dlg = FilterDialog(
            self.winfo_toplevel(), self._cat_svc.get_all(), self._criteria,
            date_format=self._date_format,
        )
        self.wait_window(dlg)
        if dlg.result is not None:
            self._criteria = dlg.result
            self._update_filter_label()
            self._reload(through_key=0)

    def _clear_filter(self):
        self._criteria = FilterCriteria()
        self._update_filter_label()
        self._reload(through_key=0)

    # ── List ─────────────────────────────────────────────────────────────────
    def _build_header(self):
        hdr = ctk.CTkFrame(self, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=2, column=0, sticky="ew", padx=8, pady=(4, 0))
        for i, (label, width) in enumerate(
            [("Date", 95), ("Category", 150), ("Description", 260), ("Amount", 110), ("", 100)]
        ):
            ctk.CTkLabel(hdr, text=label, width=width, anchor="w",
                         font=ctk.CTkFont(weight="bold")).grid(row=0, column=i, padx=4, pady=4)

    def _reload(self, through_key: int):
        self._state = PagingState()
        self._next_key = 0
        for child in self._banner_area.winfo_children():
            child.destroy()
        while self._next_key is not None and self._next_key <= through_key:
            if not self._load_next():
                break
        # a filter can leave early pages empty; keep going until something shows
        while self._next_key is not None and not self._visible_count():
            if not self._load_next():
                break
        self._render()

    def _load_next(self) -> bool:
        try:
            page = self._svc.load_page(self._criteria, self._next_key, self._page_size)
        except StoreError as exc:
            show_banner(self._banner_area, exc.message, kind="error",
                        action_text="Retry", action_cmd=self._retry)
            return False
        self._state.pages.append(page)
        self._next_key = page.next_key
        return True

    def _retry(self):
        if self._load_next():
            for child in self._banner_area.winfo_children():
                child.destroy()
            self._render()

    def _load_more(self):
        if self._load_next():
            self._render()

    def _visible_count(self) -> int:
        return sum(len(p.items) for p in self._state.pages)

    def _render(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        rows = [item for page in self._state.pages for item in page.items]
        if not rows and self._next_key is None:
            ctk.CTkLabel(
                self._scroll, text=Empty(filtered=self._criteria.is_active).message,
                text_color="gray60", justify="center",
            ).grid(row=0, column=0, pady=40)
            return

        currency = self._get_currency()
        for idx, expense in enumerate(rows):
            self._add_row(idx, expense, currency)

        if self._next_key is not None:
            ctk.CTkButton(
                self._scroll, text="Load more", width=120, fg_color="transparent",
                border_width=1, text_color=("gray10", "gray90"), command=self._load_more,
            ).grid(row=len(rows), column=0, pady=8)

    def _add_row(self, idx: int, expense: ExpenseWithCategory, currency: Currency):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        ctk.CTkLabel(row, text=format_display_date(expense.date.date(), self._date_format),
                     width=95, anchor="w").grid(row=0, column=0, padx=4, pady=4)
        ctk.CTkLabel(row, text=f"{expense.category.icon} {expense.category.name}", width=150,
                     anchor="w", text_color=expense.category.color_hex).grid(row=0, column=1, padx=4)
        ctk.CTkLabel(row, text=expense.description or "—", width=260, anchor="w").grid(
            row=0, column=2, padx=4)
        ctk.CTkLabel(row, text=format_currency(expense.amount, currency), width=110,
                     anchor="e", text_color=ERROR_COLOR).grid(row=0, column=3, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=4, padx=(4, 6))
        ctk.CTkButton(acts, text="Edit", width=44, height=24,
                      command=lambda e=expense: self._open_edit(e)).pack(side="left", padx=2)
        ctk.CTkButton(acts, text="Del", width=38, height=24, fg_color=ERROR_COLOR,
                      hover_color="#D32F2F",
                      command=lambda e=expense: self._delete(e)).pack(side="left")

    # ── Actions ──────────────────────────────────────────────────────────────
    def _open_add(self):
        form = ExpenseForm(self.winfo_toplevel(), self._svc, self._cat_svc,
                           date_format=self._date_format)
        self.wait_window(form)

    def _open_edit(self, expense: ExpenseWithCategory):
        try:
            stored = self._svc.get_expense(expense.id)
        except StoreError as exc:
            show_banner(self._banner_area, exc.message, kind="error")
            return
        if stored is None:
            show_banner(self._banner_area, "This expense no longer exists.", kind="error")
            return
        form = ExpenseForm(self.winfo_toplevel(), self._svc, self._cat_svc,
                           expense=stored, date_format=self._date_format)
        self.wait_window(form)

    def _delete(self, expense: ExpenseWithCategory):
        amount = format_currency(expense.amount, self._get_currency())
        if not confirm(self.winfo_toplevel(), "Delete Expense",
                       f"Delete this {expense.category.name} expense of {amount}?"):
            return
        result = self._svc.delete_expense(expense.id)
        if not result.ok:
            show_banner(self._banner_area, result.message, kind="error")
