import tkinter as tk

import customtkinter as ctk
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

from models.summary import SpendingSummary
from models.time_period import TimePeriod
from models.view_state import Error, SummaryEmpty, SummarySuccess
from services.summary_service import SummaryService
from ui.components.alert_banner import show_banner
from utils.currency import format_currency


class SummaryTab(ctk.CTkFrame):
    """Spending by category over a named period."""

    def __init__(self, master, summary_service: SummaryService, get_currency, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = summary_service
        self._get_currency = get_currency
        self._period_var = ctk.StringVar(value=TimePeriod.CURRENT_MONTH.display_name)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._build_toolbar()
        self._banner_area = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_area.grid(row=1, column=0, sticky="ew", padx=8)
        self._build_total_card()
        self._build_chart()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(bar, text="Period:").pack(side="left", padx=(12, 4), pady=8)
        ctk.CTkComboBox(
            bar, values=[p.display_name for p in TimePeriod], variable=self._period_var,
            width=170, state="readonly", command=lambda _: self._load(),
        ).pack(side="left", padx=(0, 12))

    def _build_total_card(self):
        card = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=10)
        card.grid(row=2, column=0, sticky="ew", padx=16, pady=10)
        ctk.CTkLabel(card, text="Total Spent", text_color="gray60").pack(pady=(10, 0), padx=16)
        self._total_label = ctk.CTkLabel(card, text="", font=ctk.CTkFont(size=22, weight="bold"))
        self._total_label.pack(pady=(4, 0), padx=16)
        self._period_label = ctk.CTkLabel(card, text="", text_color="gray60")
        self._period_label.pack(pady=(0, 10), padx=16)

    def _build_chart(self):
        area = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=8)
        area.grid(row=3, column=0, sticky="nsew", padx=16, pady=(0, 12))
        area.grid_columnconfigure(0, weight=3)
        area.grid_columnconfigure(1, weight=2)
        area.grid_rowconfigure(0, weight=1)

        self._fig = Figure(figsize=(4, 4), dpi=80, tight_layout=True)
        self._ax = self._fig.add_subplot(111)
        self._canvas = FigureCanvasTkAgg(self._fig, master=area)
        self._canvas.get_tk_widget().grid(row=0, column=0, sticky="nsew", padx=8, pady=8)

        self._legend = ctk.CTkScrollableFrame(area, fg_color="transparent")
        self._legend.grid(row=0, column=1, sticky="nsew", padx=8, pady=8)
        self._legend.grid_columnconfigure(1, weight=1)

    def _style(self):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        self._fig.patch.set_facecolor(bg)
        self._ax.set_facecolor(bg)

    def _load(self):
        for w in self._banner_area.winfo_children():
            w.destroy()
        for w in self._legend.winfo_children():
            w.destroy()

        period = TimePeriod.from_display_name(self._period_var.get())
        state = self._svc.get_summary(period)
        currency = self._get_currency()

        if isinstance(state, Error):
            show_banner(self._banner_area, state.message, kind="error",
                        action_text="Retry", action_cmd=self._load)
            self._show_message("Could not load summary")
            self._total_label.configure(text="—")
            return
        if isinstance(state, SummaryEmpty):
            self._total_label.configure(text=format_currency(0, currency))
            self._period_label.configure(text=state.period)
            self._show_message(state.message)
            return
        if isinstance(state, SummarySuccess):
            self._show_summary(state.summary, currency)

    def _show_message(self, text: str):
        self._ax.clear()
        self._style()
        self._ax.axis("off")
        self._ax.text(0.5, 0.5, text, ha="center", va="center",
                      transform=self._ax.transAxes, color="gray")
        self._canvas.draw_idle()

    def _show_summary(self, summary: SpendingSummary, currency):
        self._total_label.configure(text=format_currency(summary.total_amount, currency))
        self._period_label.configure(text=summary.period)

        self._ax.clear()
        self._style()
        self._ax.pie(
            [float(s.amount) for s in summary.category_breakdown],
            colors=[s.category.color_hex for s in summary.category_breakdown],
            startangle=90,
            counterclock=False,
        )
        self._ax.set_aspect("equal")
        self._canvas.draw_idle()

        for i, item in enumerate(summary.category_breakdown):
            tk.Label(self._legend, bg=item.category.color_hex, width=2).grid(
                row=i, column=0, padx=(0, 6), pady=2)
            ctk.CTkLabel(self._legend, text=f"{item.category.icon} {item.category.name}",
                         anchor="w").grid(row=i, column=1, sticky="w")
            ctk.CTkLabel(
                self._legend,
                text=f"{format_currency(item.amount, currency)}  ({item.percentage:.1f}%)",
                anchor="e", font=ctk.CTkFont(size=11),
            ).grid(row=i, column=2, sticky="e", padx=(8, 0))
