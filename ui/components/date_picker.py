import tkinter as tk
from datetime import date
from tkinter import ttk

import customtkinter as ctk
from tkcalendar import Calendar

from utils.constants import ERROR_COLOR
from utils.date_helpers import format_display_date, parse_display_date

_CAL_THEMES = {
    "Dark":  {"bg": "#2b2b2b", "fg": "#ffffff"},
    "Light": {"bg": "#ffffff", "fg": "#000000"},
}


class DatePicker(ctk.CTkFrame):
    """Entry in the user's display format plus a tkcalendar popup.

    get() returns a date or None; set() takes a date or None.
    """

    def __init__(self, master, initial: date | None = None,
                 date_format: str = "YYYY-MM-DD", placeholder: str = "", **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._date_format = date_format
        self._popup: ctk.CTkToplevel | None = None

        self._var = tk.StringVar(value=format_display_date(initial, date_format) if initial else "")
        self._entry = ctk.CTkEntry(
            self, textvariable=self._var, width=110, placeholder_text=placeholder,
        )
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._normalize)
        self._entry.bind("<Return>", self._normalize)

        ctk.CTkButton(self, text="📅", width=32, command=self._toggle_popup).grid(
            row=0, column=1, padx=(4, 0))

    def _parse(self) -> date | None:
        raw = self._var.get().strip()
        return parse_display_date(raw, self._date_format) if raw else None

    def get(self) -> date | None:
        return self._parse()

    def set(self, value: date | None):
        self._var.set(format_display_date(value, self._date_format) if value else "")
        self._entry.configure(border_color=("gray65", "gray35"))

    def is_blank(self) -> bool:
        return not self._var.get().strip()

    def is_valid(self) -> bool:
        return self._parse() is not None

    def _normalize(self, _event=None):
        if self.is_blank():
            self.set(None)
            return
        d = self._parse()
        if d:
            self.set(d)
        else:
            self._entry.configure(border_color=ERROR_COLOR)

    def _toggle_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._close_popup()
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        theme = _CAL_THEMES.get(ctk.get_appearance_mode(), _CAL_THEMES["Light"])
        style = ttk.Style(popup)
        style.theme_use("default")
        style.configure("Calendar.Treeview", background=theme["bg"],
                        foreground=theme["fg"], fieldbackground=theme["bg"])

        current = self._parse() or date.today()
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year, month=current.month, day=current.day,
            date_pattern="yyyy-mm-dd",
            background=theme["bg"], foreground=theme["fg"],
            headersbackground=theme["bg"], headersforeground=theme["fg"],
            selectbackground="#1f6aa5",
            weekendbackground=theme["bg"], weekendforeground=theme["fg"],
            othermonthforeground="gray60",
            bordercolor=theme["bg"],
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda _e: self._on_selected(cal))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")
        popup.bind("<FocusOut>", lambda _e: self._close_if_unfocused())

    def _on_selected(self, cal: Calendar):
        # selection_get() hands back a datetime.date regardless of date_pattern
        self.set(cal.selection_get())
        self._close_popup()

    def _close_if_unfocused(self):
        if not (self._popup and self._popup.winfo_exists()):
            return
        focused = self._popup.focus_get()
        if focused is None or not str(focused).startswith(str(self._popup)):
            self._close_popup()

    def _close_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._popup.destroy()
        self._popup = None
