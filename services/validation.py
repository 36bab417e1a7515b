import logging
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation

from models.expense import ExpenseDraft
from models.result import InvalidResult, Valid, ValidationResult
from utils.constants import (
    FUTURE_DATE_TOLERANCE_MS, MAX_AMOUNT, MAX_AMOUNT_DECIMALS, MAX_DESCRIPTION_LENGTH,
)

logger = logging.getLogger(__name__)

AMOUNT = "amount"
CATEGORY = "category"
DATE = "date"
DESCRIPTION = "description"


def parse_amount(text: str) -> Decimal | None:
    """Decimal for well-formed finite input, else None."""
    try:
        value = Decimal(text.strip())
    except (InvalidOperation, AttributeError):
        return None
    return value if value.is_finite() else None


def _amount_error(text: str) -> str | None:
    text = (text or "").strip()
    if not text:
        return "Amount is required"
    value = parse_amount(text)
    if value is None:
        return "Amount must be a valid number"
    if value <= 0:
        return "Amount must be greater than 0"
    if value > MAX_AMOUNT:
        return "Amount is too large"
    if value.as_tuple().exponent < -MAX_AMOUNT_DECIMALS:
        return f"Amount can have at most {MAX_AMOUNT_DECIMALS} decimal places"
    return None


def _date_error(value: datetime | None, now: datetime) -> str | None:
    if value is None:
        return "Date is required"
    if value > now + timedelta(milliseconds=FUTURE_DATE_TOLERANCE_MS):
        return "Date cannot be more than 1 day in the future"
    return None


def validate_expense(draft: ExpenseDraft, now: datetime | None = None) -> ValidationResult:
    """Check every field and collect every error; never stops at the first."""
    now = now or datetime.now()
    errors: dict[str, str] = {}

    amount_error = _amount_error(draft.amount)
    if amount_error:
        errors[AMOUNT] = amount_error

    if draft.category_id is None or draft.category_id <= 0:
        errors[CATEGORY] = "Category is required"

    date_error = _date_error(draft.date, now)
    if date_error:
        errors[DATE] = date_error

    length = len(draft.description or "")
    if length > MAX_DESCRIPTION_LENGTH:
        errors[DESCRIPTION] = (
            f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters "
            f"({length}/{MAX_DESCRIPTION_LENGTH})"
        )

    if errors:
        logger.debug("Expense draft rejected: %s", sorted(errors))
        return InvalidResult(errors)
    return Valid
