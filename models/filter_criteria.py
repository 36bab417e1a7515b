from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class FilterCriteria:
    """Optional date range plus category set. All empty means "no filter"."""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    category_ids: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.category_ids, frozenset):
            object.__setattr__(self, "category_ids", frozenset(self.category_ids))

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    @property
    def active_count(self) -> int:
        """Number of active restrictions: date range and category set, 0..2."""
        return int(self.has_date_range) + int(bool(self.category_ids))

    @property
    def is_active(self) -> bool:
        return self.active_count > 0
