from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    icon: str
    color_hex: str = "#B19CD9"
    is_custom: bool = False
    sort_order: int = 999
