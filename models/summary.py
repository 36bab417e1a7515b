from dataclasses import dataclass, field
from decimal import Decimal

from models.category import Category


@dataclass(frozen=True)
class CategorySpending:
    category: Category
    amount: Decimal
    percentage: float       # 0..100, unrounded


@dataclass(frozen=True)
class SpendingSummary:
    total_amount: Decimal
    category_breakdown: list[CategorySpending] = field(default_factory=list)
    period: str = ""
