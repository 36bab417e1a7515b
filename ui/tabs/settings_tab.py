import logging
from tkinter import filedialog

import customtkinter as ctk

from database.db_manager import DatabaseManager
from models.view_state import Error
from services.csv_exporter import generate_filename
from services.expense_service import ExpenseService
from ui.components.alert_banner import show_banner
from utils.app_config import get_db_folder, set_db_folder
from utils.constants import DEFAULT_PAGE_SIZE, SUCCESS_COLOR
from utils.currency import Currency
from utils.date_helpers import DATE_FORMAT_OPTIONS

logger = logging.getLogger(__name__)

_PAGE_SIZES = ["10", "20", "50", "100"]


class SettingsTab(ctk.CTkFrame):
    """DB folder, CSV export and display preferences."""

    def __init__(
        self,
        master,
        db: DatabaseManager,
        expense_service: ExpenseService,
        on_settings_changed,   # callable, no args
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._db = db
        self._expense_svc = expense_service
        self._on_settings_changed = on_settings_changed

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._banner_area = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_area.grid(row=0, column=0, sticky="ew", padx=12)

        scroll = ctk.CTkScrollableFrame(self, fg_color="transparent")
        scroll.grid(row=1, column=0, sticky="nsew")
        scroll.grid_columnconfigure(0, weight=1)

        self._build_preferences_section(scroll)
        self._build_export_section(scroll)
        self._build_db_folder_section(scroll)

    def refresh(self):
        self._load_preferences()

    # ── Preferences ───────────────────────────────────────────────────────────

    def _build_preferences_section(self, parent):
        section = self._make_section(parent, "Preferences", row=0)

        self._currency_var = ctk.StringVar()
        self._date_fmt_var = ctk.StringVar()
        self._appearance_var = ctk.StringVar()
        self._page_size_var = ctk.StringVar()

        rows = [
            ("Currency:", self._currency_var,
             [f"{c.code} ({c.symbol}) {c.display_name}" for c in Currency]),
            ("Date Format:", self._date_fmt_var, DATE_FORMAT_OPTIONS),
            ("Appearance:", self._appearance_var, ["System", "Light", "Dark"]),
            ("Page Size:", self._page_size_var, _PAGE_SIZES),
        ]
        for r, (label, var, values) in enumerate(rows):
            ctk.CTkLabel(section, text=label, anchor="e", width=120).grid(
                row=r, column=0, padx=(8, 4), pady=6, sticky="e")
            ctk.CTkComboBox(section, values=values, variable=var, width=260,
                            state="readonly").grid(row=r, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkButton(section, text="Save Settings", width=140, command=self._save).grid(
            row=len(rows), column=0, columnspan=2, pady=(10, 4))
        self._status_var = ctk.StringVar()
        ctk.CTkLabel(section, textvariable=self._status_var, text_color=SUCCESS_COLOR,
                     font=ctk.CTkFont(size=11)).grid(
            row=len(rows) + 1, column=0, columnspan=2, pady=(0, 8))
        self._load_preferences()

    def _load_preferences(self):
        currency = Currency.from_code(self._db.get_setting("currency", Currency.INR.code))
        self._currency_var.set(f"{currency.code} ({currency.symbol}) {currency.display_name}")
        self._date_fmt_var.set(self._db.get_setting("date_format", DATE_FORMAT_OPTIONS[0]))
        self._appearance_var.set(self._db.get_setting("appearance_mode", "system").title())
        self._page_size_var.set(self._db.get_setting("page_size", str(DEFAULT_PAGE_SIZE)))

    def _save(self):
        appearance = self._appearance_var.get().lower()
        self._db.set_setting("currency", self._currency_var.get().split(" ", 1)[0])
        self._db.set_setting("date_format", self._date_fmt_var.get())
        self._db.set_setting("appearance_mode", appearance)
        self._db.set_setting("page_size", self._page_size_var.get())
        ctk.set_appearance_mode(appearance)
        logger.info("Settings saved")
        self._status_var.set("Settings saved.")
        self._on_settings_changed()

    # ── Export ────────────────────────────────────────────────────────────────

    def _build_export_section(self, parent):
        section = self._make_section(parent, "Export", row=1)
        ctk.CTkLabel(
            section, text="Save every expense as a CSV file.", text_color="gray60",
            font=ctk.CTkFont(size=11), anchor="w",
        ).grid(row=0, column=0, sticky="w", padx=8, pady=(4, 6))
        ctk.CTkButton(section, text="Export CSV…", width=130, command=self._export_csv).grid(
            row=1, column=0, sticky="w", padx=8, pady=(0, 8))

    def _export_csv(self):
        state = self._expense_svc.export_csv()
        if isinstance(state, Error):
            show_banner(self._banner_area, state.message, kind="error")
            return
        path = filedialog.asksaveasfilename(
            title="Export as CSV",
            defaultextension=".csv",
            initialfile=generate_filename(),
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")],
        )
        if not path:
            return
        result = self._expense_svc.write_export(path, state.csv_content)
        if result.ok:
            show_banner(self._banner_area,
                        f"Exported {state.row_count} expenses to {path}", kind="success")
        else:
            show_banner(self._banner_area, result.message, kind="error")

    # ── DB folder ─────────────────────────────────────────────────────────────

    def _build_db_folder_section(self, parent):
        section = self._make_section(parent, "Database Folder", row=2)
        section.grid_columnconfigure(0, weight=1)

        self._db_folder_var = ctk.StringVar(value=get_db_folder() or "(default: app folder)")
        ctk.CTkEntry(section, textvariable=self._db_folder_var, state="readonly", width=340).grid(
            row=0, column=0, padx=(8, 4), pady=4, sticky="ew")
        ctk.CTkButton(section, text="Browse…", width=90, command=self._browse_db_folder).grid(
            row=0, column=1, padx=4)
        ctk.CTkButton(
            section, text="Reset to Default", width=120, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=lambda: self._set_db_folder(None),
        ).grid(row=0, column=2, padx=(4, 8))

        self._restart_label = ctk.CTkLabel(section, text="", text_color="#FF9800",
                                           font=ctk.CTkFont(size=11), anchor="w")
        self._restart_label.grid(row=1, column=0, columnspan=3, sticky="w", padx=8, pady=(0, 6))

    def _browse_db_folder(self):
        path = filedialog.askdirectory(title="Choose DB folder")
        if path:
            self._set_db_folder(path)

    def _set_db_folder(self, path: str | None):
        try:
            set_db_folder(path)
        except OSError as exc:
            logger.exception("Could not save DB folder setting")
            show_banner(self._banner_area, f"Could not save setting: {exc}", kind="error")
            return
        self._db_folder_var.set(path or "(default: app folder)")
        self._restart_label.configure(text="Restart the app for the change to take effect.")

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _make_section(self, parent, title: str, row: int) -> ctk.CTkFrame:
        """Create a labelled card section and return its inner frame."""
        outer = ctk.CTkFrame(parent, corner_radius=8)
        outer.grid(row=row, column=0, sticky="ew", padx=12, pady=8)
        outer.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(outer, text=title, font=ctk.CTkFont(size=14, weight="bold"),
                     anchor="w").grid(row=0, column=0, sticky="w", padx=12, pady=(10, 4))
        inner = ctk.CTkFrame(outer, fg_color="transparent")
        inner.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 8))
        return inner
