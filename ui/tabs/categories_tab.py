import customtkinter as ctk

from models.category import Category
from services.category_service import CategoryService
from ui.components.alert_banner import show_banner
from ui.components.category_form import CategoryForm
from ui.components.confirm_dialog import confirm
from utils.constants import ERROR_COLOR


class CategoriesTab(ctk.CTkFrame):
    def __init__(self, master, category_service: CategoryService, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = category_service

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._banner_area = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_area.grid(row=1, column=0, sticky="ew", padx=8)
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(bar, text="Categories", font=ctk.CTkFont(size=13, weight="bold")).pack(
            side="left", padx=(12, 16), pady=8)
        ctk.CTkButton(bar, text="+ Add Category", command=self._open_add).pack(
            side="left", padx=4, pady=6)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        categories = self._svc.get_all()
        if not categories:
            ctk.CTkLabel(self._scroll, text="No categories yet.", text_color="gray60").grid(
                row=0, column=0, pady=40)
            return
        for idx, cat in enumerate(categories):
            self._add_row(idx, cat)

    def _add_row(self, idx: int, cat: Category):
        row = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        row.grid(row=idx, column=0, sticky="ew", padx=4, pady=3)
        row.grid_columnconfigure(2, weight=1)

        ctk.CTkLabel(row, text=cat.icon, width=36, height=36, corner_radius=18,
                     fg_color=cat.color_hex, font=ctk.CTkFont(size=16)).grid(
            row=0, column=0, padx=(10, 0), pady=6)
        ctk.CTkLabel(row, text="", width=6, height=28, fg_color=cat.color_hex).grid(
            row=0, column=1, padx=(8, 0))

        name_frame = ctk.CTkFrame(row, fg_color="transparent")
        name_frame.grid(row=0, column=2, padx=8, sticky="w")
        ctk.CTkLabel(name_frame, text=cat.name, font=ctk.CTkFont(size=13, weight="bold"),
                     anchor="w").pack(side="left")
        if cat.is_custom:
            ctk.CTkLabel(name_frame, text="Custom", text_color="gray60",
                         font=ctk.CTkFont(size=10)).pack(side="left", padx=(6, 0))

        buttons = ctk.CTkFrame(row, fg_color="transparent")
        buttons.grid(row=0, column=3, padx=(4, 10), pady=6)
        ctk.CTkButton(
            buttons, text="Edit", width=60, height=26, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=lambda c=cat: self._open_edit(c),
        ).pack(side="left", padx=(0, 4))
        # disabled while referenced; _on_delete still reports a reference added later
        deletable = self._svc.can_delete(cat.id)
        ctk.CTkButton(
            buttons, text="Delete", width=65, height=26,
            fg_color=ERROR_COLOR if deletable else ("gray70", "gray35"),
            hover_color="#D32F2F", state="normal" if deletable else "disabled",
            command=lambda c=cat: self._on_delete(c),
        ).pack(side="left")

    def _open_add(self):
        form = CategoryForm(self.winfo_toplevel(), self._svc)
        self.wait_window(form)

    def _open_edit(self, cat: Category):
        form = CategoryForm(self.winfo_toplevel(), self._svc, category=cat)
        self.wait_window(form)

    def _on_delete(self, cat: Category):
        if not confirm(self.winfo_toplevel(), "Delete Category",
                       f"Delete '{cat.name}'? This cannot be undone."):
            return
        result = self._svc.delete_category(cat.id)
        if not result.ok:
            show_banner(self._banner_area, result.message, kind="error")
