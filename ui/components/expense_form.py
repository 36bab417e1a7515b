from datetime import datetime

import customtkinter as ctk

from models.errors import ValidationError
from models.expense import Expense, ExpenseDraft
from services.category_service import CategoryService
from services.expense_service import ExpenseService
from ui.components.date_picker import DatePicker
from utils.constants import ERROR_COLOR, MAX_DESCRIPTION_LENGTH
from utils.date_helpers import today

_FIELDS = ("amount", "category", "date", "description")


class ExpenseForm(ctk.CTkToplevel):
    """Add or edit an expense. Every field error is shown at once."""

    def __init__(
        self,
        master,
        expense_service: ExpenseService,
        category_service: CategoryService,
        expense: Expense | None = None,
        date_format: str = "YYYY-MM-DD",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = expense_service
        self._expense = expense
        self._saving = False
        self.saved = False

        self.title("Edit Expense" if expense else "Add Expense")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._cats = category_service.get_all()
        self._cat_labels = [f"{c.icon}  {c.name}" for c in self._cats]
        self._errors: dict[str, ctk.StringVar] = {f: ctk.StringVar() for f in _FIELDS}

        r = 0
        self._label("Amount:", r)
        self._amount_var = ctk.StringVar(value=f"{expense.amount:.2f}" if expense else "")
        amount_entry = ctk.CTkEntry(self, textvariable=self._amount_var, width=220,
                                    placeholder_text="0.00")
        amount_entry.grid(row=r, column=1, padx=(0, 16), pady=(12, 0), sticky="ew")
        r = self._error_row(r + 1, "amount")

        self._label("Category:", r)
        current = next((lbl for c, lbl in zip(self._cats, self._cat_labels)
                        if expense and c.id == expense.category_id), "")
        self._cat_var = ctk.StringVar(value=current)
        ctk.CTkComboBox(
            self, values=self._cat_labels, variable=self._cat_var,
            width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=(4, 0), sticky="ew")
        r = self._error_row(r + 1, "category")

        self._label("Date:", r)
        self._date_picker = DatePicker(
            self, initial=expense.date.date() if expense else today(),
            date_format=date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=(4, 0), sticky="w")
        r = self._error_row(r + 1, "date")

        self._label("Description:", r)
        self._desc_var = ctk.StringVar(value=expense.description if expense else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=220,
                     placeholder_text="Optional").grid(
            row=r, column=1, padx=(0, 16), pady=(4, 0), sticky="ew")
        r += 1
        self._counter = ctk.CTkLabel(self, text="", text_color="gray60", anchor="e")
        self._counter.grid(row=r, column=1, padx=(0, 16), sticky="e")
        self._desc_var.trace_add("write", lambda *_: self._update_counter())
        self._update_counter()
        r = self._error_row(r + 1, "description")

        self._general_error = ctk.StringVar()
        ctk.CTkLabel(self, textvariable=self._general_error, text_color=ERROR_COLOR,
                     wraplength=300, anchor="w").grid(
            row=r, column=0, columnspan=2, padx=16, sticky="ew")
        r += 1

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=r, column=0, columnspan=2, padx=16, pady=(8, 16), sticky="ew")
        ctk.CTkButton(
            buttons, text="Cancel", width=90, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self.destroy,
        ).pack(side="left")
        self._save_btn = ctk.CTkButton(buttons, text="Save", width=110, command=self._on_save)
        self._save_btn.pack(side="right")

        self.bind("<Return>", lambda _e: self._on_save())
        self.transient(master)
        self.grab_set()
        self._center()
        amount_entry.focus_set()

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(row=row, column=0, padx=(16, 8), pady=(4, 0), sticky="e")

    def _error_row(self, row: int, field: str) -> int:
        ctk.CTkLabel(self, textvariable=self._errors[field], text_color=ERROR_COLOR,
                     font=ctk.CTkFont(size=11), anchor="w", height=14).grid(
            row=row, column=1, padx=(0, 16), sticky="w")
        return row + 1

    def _update_counter(self):
        n = len(self._desc_var.get())
        self._counter.configure(
            text=f"{n}/{MAX_DESCRIPTION_LENGTH}",
            text_color=ERROR_COLOR if n > MAX_DESCRIPTION_LENGTH else "gray60",
        )

    def _build_draft(self) -> ExpenseDraft:
        label = self._cat_var.get()
        category = next((c for c, lbl in zip(self._cats, self._cat_labels) if lbl == label), None)
        day = self._date_picker.get()
        when = None
        if day is not None:
            # keep the time of day of the existing expense; new ones take the current time
            clock = self._expense.date.time() if self._expense else datetime.now().time()
            when = datetime.combine(day, clock)
        return ExpenseDraft(
            amount=self._amount_var.get(),
            category_id=category.id if category else None,
            date=when,
            description=self._desc_var.get(),
        )

    def _show_errors(self, errors: dict[str, str]):
        for field, var in self._errors.items():
            var.set(errors.get(field, ""))

    def _on_save(self):
        if self._saving:
            return
        self._saving = True
        self._save_btn.configure(state="disabled")
        self._general_error.set("")

        draft = self._build_draft()
        if self._expense:
            result = self._svc.update_expense(self._expense.id, draft)
        else:
            result = self._svc.add_expense(draft)

        if result.ok:
            self.saved = True
            self.destroy()
            return

        error = result.error
        if isinstance(error, ValidationError):
            errors = dict(error.field_errors)
            if not (self._date_picker.is_blank() or self._date_picker.is_valid()):
                errors["date"] = "Invalid date"
            self._show_errors(errors)
        else:
            self._show_errors({})
            self._general_error.set(error.message)
        self._saving = False
        self._save_btn.configure(state="normal")

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_rootx() + self.master.winfo_width() // 2
        mh = self.master.winfo_rooty() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
