import logging
from datetime import datetime
from decimal import Decimal

from models.expense import ExpenseWithCategory
from models.summary import CategorySpending, SpendingSummary
from models.time_period import TimePeriod
from models.view_state import Error, SummaryEmpty, SummaryState, SummarySuccess
from services.expense_service import ExpenseService
from utils.date_helpers import resolve_period

logger = logging.getLogger(__name__)


def summarize(records: list[ExpenseWithCategory], period_label: str) -> SpendingSummary:
    """Total spend plus a per-category breakdown, largest first.

    Sums are exact Decimals. Percentages are left unrounded; display code
    decides how many places to show. Categories tied on amount keep the
    order in which they first appear in records.
    """
    total = sum((r.amount for r in records), Decimal("0"))

    groups: dict[int, list] = {}
    for record in records:
        entry = groups.get(record.category.id)
        if entry is None:
            groups[record.category.id] = [record.category, record.amount]
        else:
            entry[1] += record.amount

    breakdown = [
        CategorySpending(
            category=category,
            amount=amount,
            percentage=float(amount / total * 100) if total else 0.0,
        )
        for category, amount in groups.values()
    ]
    breakdown.sort(key=lambda s: s.amount, reverse=True)

    return SpendingSummary(
        total_amount=total,
        category_breakdown=breakdown,
        period=period_label,
    )


class SummaryService:
    def __init__(self, expense_service: ExpenseService):
        self._expenses = expense_service

    def get_summary(self, period: TimePeriod, now: datetime | None = None) -> SummaryState:
        start, end = resolve_period(period, now)
        result = self._expenses.get_by_date_range(start, end)
        if result.failed:
            return Error(result.error.message)
        if not result.items:
            return SummaryEmpty(period.display_name)
        summary = summarize(result.items, period.display_name)
        logger.debug(
            "Summary for %s: total=%s across %d categories",
            period.display_name, summary.total_amount, len(summary.category_breakdown),
        )
        return SummarySuccess(summary)
