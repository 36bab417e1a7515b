from dataclasses import replace
from tkinter import colorchooser

import customtkinter as ctk

from models.category import Category
from services.category_service import CategoryService
from utils.constants import CATEGORY_COLORS, CATEGORY_ICONS, ERROR_COLOR, MAX_CATEGORY_NAME_LENGTH

_ICONS_PER_ROW = 6
_COLORS_PER_ROW = 6


class CategoryForm(ctk.CTkToplevel):
    """Add or edit a category: name, emoji icon and colour."""

    def __init__(
        self,
        master,
        category_service: CategoryService,
        category: Category | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = category_service
        self._category = category
        self.saved = False

        self.title("Edit Category" if category else "New Category")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0
        ctk.CTkLabel(self, text="Name:").grid(row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e")
        self._name_var = ctk.StringVar(value=category.name if category else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=240,
                     placeholder_text=f"1-{MAX_CATEGORY_NAME_LENGTH} characters").grid(
            row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew")
        r += 1

        ctk.CTkLabel(self, text="Icon:").grid(row=r, column=0, padx=(16, 8), pady=4, sticky="ne")
        self._icon = category.icon if category else CATEGORY_ICONS[0]
        self._icon_buttons: dict[str, ctk.CTkButton] = {}
        icon_grid = ctk.CTkFrame(self, fg_color="transparent")
        icon_grid.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for i, icon in enumerate(CATEGORY_ICONS):
            btn = ctk.CTkButton(icon_grid, text=icon, width=36, height=32,
                                command=lambda ic=icon: self._select_icon(ic))
            btn.grid(row=i // _ICONS_PER_ROW, column=i % _ICONS_PER_ROW, padx=2, pady=2)
            self._icon_buttons[icon] = btn
        self._select_icon(self._icon)
        r += 1

        ctk.CTkLabel(self, text="Color:").grid(row=r, column=0, padx=(16, 8), pady=4, sticky="ne")
        self._color = category.color_hex if category else CATEGORY_COLORS[0]
        color_area = ctk.CTkFrame(self, fg_color="transparent")
        color_area.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for i, color in enumerate(CATEGORY_COLORS):
            ctk.CTkButton(
                color_area, text="", width=28, height=28, corner_radius=14,
                fg_color=color, hover_color=color,
                command=lambda c=color: self._select_color(c),
            ).grid(row=i // _COLORS_PER_ROW, column=i % _COLORS_PER_ROW, padx=2, pady=2)
        pick_row = (len(CATEGORY_COLORS) - 1) // _COLORS_PER_ROW + 1
        self._swatch = ctk.CTkLabel(color_area, text="", width=60, height=24, corner_radius=4)
        self._swatch.grid(row=pick_row, column=0, columnspan=2, pady=(6, 0), sticky="w")
        ctk.CTkButton(
            color_area, text="Custom...", width=80, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self._pick_color,
        ).grid(row=pick_row, column=2, columnspan=3, pady=(6, 0), sticky="w")
        self._select_color(self._color)
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(self, textvariable=self._error_var, text_color=ERROR_COLOR,
                     wraplength=300, anchor="w").grid(
            row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            buttons, text="Cancel", width=90, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(buttons, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _select_icon(self, icon: str):
        self._icon = icon
        for ic, btn in self._icon_buttons.items():
            if ic == icon:
                btn.configure(fg_color=("#3B8ED0", "#1F6AA5"))
            else:
                btn.configure(fg_color="transparent")

    def _select_color(self, color: str):
        self._color = color
        self._swatch.configure(fg_color=color, text=color, text_color="white")

    def _pick_color(self):
        _rgb, hex_color = colorchooser.askcolor(color=self._color, parent=self,
                                                title="Pick Category Color")
        if hex_color:
            self._select_color(hex_color.upper())

    def _on_save(self):
        name = self._name_var.get()
        if self._category:
            result = self._svc.update_category(
                replace(self._category, name=name, icon=self._icon, color_hex=self._color)
            )
        else:
            result = self._svc.add_category(name, self._icon, self._color)
        if result.ok:
            self.saved = True
            self.destroy()
        else:
            self._error_var.set(result.message)

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_rootx() + self.master.winfo_width() // 2
        mh = self.master.winfo_rooty() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
