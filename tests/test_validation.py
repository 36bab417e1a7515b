from datetime import datetime, timedelta

from models.expense import ExpenseDraft
from services.validation import parse_amount, validate_expense

NOW = datetime(2024, 6, 15, 12, 0, 0)


def _draft(**overrides):
    values = dict(amount="12.50", category_id=1, date=NOW, description="Lunch")
    values.update(overrides)
    return ExpenseDraft(**values)


def _errors(draft):
    result = validate_expense(draft, now=NOW)
    assert not result.is_valid
    return result.errors


def test_well_formed_draft_is_valid():
    assert validate_expense(_draft(), now=NOW).is_valid
    assert validate_expense(_draft(amount="1e3"), now=NOW).is_valid
    assert validate_expense(_draft(amount="1.50e1"), now=NOW).is_valid
    assert validate_expense(_draft(amount="1.5E-1"), now=NOW).is_valid
    assert validate_expense(_draft(amount="999999999.99"), now=NOW).is_valid
    assert validate_expense(_draft(amount=" 7 "), now=NOW).is_valid
    assert validate_expense(_draft(description=""), now=NOW).is_valid
    assert validate_expense(_draft(description="x" * 200), now=NOW).is_valid


def test_amount_messages_in_priority_order():
    assert _errors(_draft(amount=""))["amount"] == "Amount is required"
    assert _errors(_draft(amount="   "))["amount"] == "Amount is required"
    assert _errors(_draft(amount="abc"))["amount"] == "Amount must be a valid number"
    assert _errors(_draft(amount="0"))["amount"] == "Amount must be greater than 0"
    assert _errors(_draft(amount="-5"))["amount"] == "Amount must be greater than 0"
    assert _errors(_draft(amount="1000000000"))["amount"] == "Amount is too large"
    assert _errors(_draft(amount="10.123"))["amount"] == "Amount can have at most 2 decimal places"


def test_exponent_notation_cannot_sneak_in_extra_decimals():
    for text in ("1E-3", "5e-3", "1.5E-4", "1.000"):
        assert _errors(_draft(amount=text))["amount"] == "Amount can have at most 2 decimal places"


def test_non_finite_amounts_are_not_numbers():
    for text in ("nan", "NaN", "inf", "-Infinity"):
        assert _errors(_draft(amount=text))["amount"] == "Amount must be a valid number"


def test_parse_amount():
    assert str(parse_amount("12.50")) == "12.50"
    assert parse_amount("twelve") is None
    assert parse_amount("nan") is None


def test_category_required():
    assert _errors(_draft(category_id=None))["category"] == "Category is required"
    assert _errors(_draft(category_id=0))["category"] == "Category is required"


def test_date_rules():
    assert _errors(_draft(date=None))["date"] == "Date is required"
    # exactly one day ahead is still allowed; anything beyond is not
    assert validate_expense(_draft(date=NOW + timedelta(days=1)), now=NOW).is_valid
    late = NOW + timedelta(days=1, microseconds=1000)
    assert _errors(_draft(date=late))["date"] == "Date cannot be more than 1 day in the future"
    assert validate_expense(_draft(date=NOW - timedelta(days=400)), now=NOW).is_valid


def test_description_length_shows_count():
    errors = _errors(_draft(description="x" * 201))
    assert errors["description"] == "Description must be at most 200 characters (201/200)"


def test_all_errors_collected_at_once():
    errors = _errors(ExpenseDraft(description="y" * 250))
    assert set(errors) == {"amount", "category", "date", "description"}
