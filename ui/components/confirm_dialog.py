import customtkinter as ctk

from utils.constants import ERROR_COLOR


class ConfirmDialog(ctk.CTkToplevel):
    """Modal yes/no prompt. Blocks until closed; read the answer from .result."""

    def __init__(self, master, title: str, message: str,
                 confirm_text: str = "Delete", destructive: bool = True, **kwargs):
        super().__init__(master, **kwargs)
        self.title(title)
        self.result = False
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, wraplength=360, justify="left", padx=20, pady=16,
        ).grid(row=0, column=0, sticky="ew")

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=1, column=0, pady=(0, 16), padx=20, sticky="e")

        ctk.CTkButton(
            buttons, text="Cancel", width=90, fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"), command=self.destroy,
        ).pack(side="left", padx=(0, 8))

        confirm_kwargs = {"fg_color": ERROR_COLOR, "hover_color": "#D32F2F"} if destructive else {}
        ctk.CTkButton(
            buttons, text=confirm_text, width=90, command=self._confirm, **confirm_kwargs,
        ).pack(side="left")

        self.bind("<Escape>", lambda _e: self.destroy())
        self.transient(master)
        self.grab_set()
        self._center_on(master)
        self.wait_window()

    def _center_on(self, master):
        self.update_idletasks()
        cx = master.winfo_rootx() + master.winfo_width() // 2
        cy = master.winfo_rooty() + master.winfo_height() // 2
        self.geometry(f"+{cx - self.winfo_width() // 2}+{cy - self.winfo_height() // 2}")

    def _confirm(self):
        self.result = True
        self.destroy()


def confirm(master, title: str, message: str, **kwargs) -> bool:
    return ConfirmDialog(master, title, message, **kwargs).result
