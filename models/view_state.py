"""Tagged states returned by the read operations, one variant per outcome."""
from dataclasses import dataclass, field
from typing import Optional, Union

from models.errors import StoreError
from models.expense import ExpenseWithCategory
from models.filter_criteria import FilterCriteria
from models.summary import SpendingSummary


@dataclass(frozen=True)
class ReadResult:
    """Joined read. A failed read is empty and carries the error."""
    items: list[ExpenseWithCategory] = field(default_factory=list)
    error: Optional[StoreError] = None
    dropped: int = 0        # rows skipped because their category is missing

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Success:
    expenses: list[ExpenseWithCategory]
    active_filters: FilterCriteria


@dataclass(frozen=True)
class Empty:
    filtered: bool = False  # True: "nothing matches", False: "nothing recorded yet"

    @property
    def message(self) -> str:
        if self.filtered:
            return "No expenses match your filters.\nTry adjusting your criteria."
        return "No expenses yet.\nStart tracking your spending!"


@dataclass(frozen=True)
class Error:
    message: str


@dataclass(frozen=True)
class SummarySuccess:
    summary: SpendingSummary


@dataclass(frozen=True)
class SummaryEmpty:
    period: str

    @property
    def message(self) -> str:
        return "No expenses for this period"


@dataclass(frozen=True)
class ExportReady:
    csv_content: str
    row_count: int


ListState = Union[Loading, Success, Empty, Error]
SummaryState = Union[Loading, SummarySuccess, SummaryEmpty, Error]
ExportState = Union[ExportReady, Error]
