from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from models.category import Category


@dataclass(frozen=True)
class Expense:
    id: int
    amount: Decimal
    category_id: int
    date: datetime          # when the money was spent
    description: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ExpenseWithCategory:
    """Expense joined to its category. Built on every read, never stored."""
    id: int
    amount: Decimal
    category: Category
    date: datetime
    description: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def join(cls, expense: Expense, category: Category) -> "ExpenseWithCategory":
        return cls(
            id=expense.id,
            amount=expense.amount,
            category=category,
            date=expense.date,
            description=expense.description,
            created_at=expense.created_at,
            updated_at=expense.updated_at,
        )


@dataclass
class ExpenseDraft:
    """Unvalidated form input for a new or edited expense."""
    amount: str = ""
    category_id: Optional[int] = None
    date: Optional[datetime] = None
    description: str = ""
