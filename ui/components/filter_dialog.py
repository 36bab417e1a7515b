import customtkinter as ctk

from models.category import Category
from models.filter_criteria import FilterCriteria
from ui.components.date_picker import DatePicker
from utils.constants import ERROR_COLOR
from utils.date_helpers import end_of_day, start_of_day


class FilterDialog(ctk.CTkToplevel):
    """Pick a date range and a set of categories. .result is None on cancel."""

    def __init__(self, master, categories: list[Category], criteria: FilterCriteria,
                 date_format: str = "YYYY-MM-DD", **kwargs):
        super().__init__(master, **kwargs)
        self.title("Filter Expenses")
        self.resizable(False, False)
        self.result: FilterCriteria | None = None
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(self, text="From:").grid(row=0, column=0, padx=(16, 8), pady=(16, 4), sticky="e")
        self._start = DatePicker(
            self, initial=criteria.start_date.date() if criteria.start_date else None,
            date_format=date_format,
        )
        self._start.grid(row=0, column=1, padx=(0, 16), pady=(16, 4), sticky="w")

        ctk.CTkLabel(self, text="To:").grid(row=1, column=0, padx=(16, 8), pady=4, sticky="e")
        self._end = DatePicker(
            self, initial=criteria.end_date.date() if criteria.end_date else None,
            date_format=date_format,
        )
        self._end.grid(row=1, column=1, padx=(0, 16), pady=4, sticky="w")

        ctk.CTkLabel(self, text="Categories:").grid(row=2, column=0, padx=(16, 8), pady=4, sticky="ne")
        boxes = ctk.CTkScrollableFrame(self, width=220, height=180)
        boxes.grid(row=2, column=1, padx=(0, 16), pady=4, sticky="ew")
        self._checks: dict[int, ctk.BooleanVar] = {}
        for i, cat in enumerate(categories):
            var = ctk.BooleanVar(value=cat.id in criteria.category_ids)
            ctk.CTkCheckBox(boxes, text=f"{cat.icon}  {cat.name}", variable=var).grid(
                row=i, column=0, padx=4, pady=2, sticky="w")
            self._checks[cat.id] = var

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(self, textvariable=self._error_var, text_color=ERROR_COLOR, anchor="w").grid(
            row=3, column=0, columnspan=2, padx=16, sticky="ew")

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=4, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            buttons, text="Cancel", width=90, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(
            buttons, text="Reset", width=80, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self._reset,
        ).pack(side="left", padx=8)
        ctk.CTkButton(buttons, text="Apply", width=90, command=self._apply).pack(side="right")

        self.transient(master)
        self.grab_set()

    def _reset(self):
        self._start.set(None)
        self._end.set(None)
        for var in self._checks.values():
            var.set(False)

    def _apply(self):
        for picker, label in ((self._start, "start"), (self._end, "end")):
            if not picker.is_blank() and not picker.is_valid():
                self._error_var.set(f"Invalid {label} date.")
                return
        start, end = self._start.get(), self._end.get()
        if start and end and start > end:
            self._error_var.set("Start date must be on or before end date.")
            return
        self.result = FilterCriteria(
            start_date=start_of_day(start) if start else None,
            end_date=end_of_day(end) if end else None,
            category_ids=frozenset(cid for cid, var in self._checks.items() if var.get()),
        )
        self.destroy()
