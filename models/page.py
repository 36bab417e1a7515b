from dataclasses import dataclass, field
from typing import Optional

from models.expense import ExpenseWithCategory


@dataclass(frozen=True)
class Page:
    items: list[ExpenseWithCategory]
    prev_key: Optional[int]
    next_key: Optional[int]


@dataclass
class PagingState:
    """Pages loaded so far, plus the list position the user was looking at."""
    pages: list[Page] = field(default_factory=list)
    anchor_position: Optional[int] = None

    def closest_page_to_position(self, position: int) -> Optional[Page]:
        if not self.pages:
            return None
        seen = 0
        for page in self.pages:
            seen += len(page.items)
            if position < seen:
                return page
        return self.pages[-1]
