import customtkinter as ctk

from utils.constants import ERROR_COLOR, INFO_COLOR, SUCCESS_COLOR

BANNER_COLORS = {"error": ERROR_COLOR, "success": SUCCESS_COLOR, "info": INFO_COLOR}


class AlertBanner(ctk.CTkFrame):
    """Dismissible inline banner. Used for read failures and export results."""

    def __init__(self, master, message: str, kind: str = "info",
                 action_text: str | None = None, action_cmd=None, **kwargs):
        super().__init__(master, fg_color=BANNER_COLORS.get(kind, INFO_COLOR),
                         corner_radius=6, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, text_color="white", anchor="w",
            justify="left", padx=10, pady=6,
        ).grid(row=0, column=0, sticky="ew")

        col = 1
        if action_text and action_cmd:
            ctk.CTkButton(
                self, text=action_text, width=60, height=24,
                fg_color="transparent", border_width=1, border_color="white",
                text_color="white", command=action_cmd,
            ).grid(row=0, column=col, padx=2)
            col += 1

        ctk.CTkButton(
            self, text="✕", width=28, height=24, fg_color="transparent",
            text_color="white", command=self.destroy,
        ).grid(row=0, column=col, padx=(0, 4))


def show_banner(container, message: str, kind: str = "info", **kwargs) -> AlertBanner:
    """Replace whatever banner the container holds with a new one."""
    for child in container.winfo_children():
        child.destroy()
    banner = AlertBanner(container, message, kind=kind, **kwargs)
    banner.pack(fill="x", pady=2)
    return banner
