from decimal import Decimal
from enum import Enum


class Currency(Enum):
    INR = ("INR", "₹", "Indian Rupee")
    USD = ("USD", "$", "US Dollar")
    EUR = ("EUR", "€", "Euro")
    GBP = ("GBP", "£", "British Pound")
    JPY = ("JPY", "¥", "Japanese Yen")
    AUD = ("AUD", "A$", "Australian Dollar")
    CAD = ("CAD", "C$", "Canadian Dollar")
    CHF = ("CHF", "CHF", "Swiss Franc")

    def __init__(self, code: str, symbol: str, display_name: str):
        self.code = code
        self.symbol = symbol
        self.display_name = display_name

    @classmethod
    def from_code(cls, code: str) -> "Currency":
        """Unknown codes fall back to INR."""
        for currency in cls:
            if currency.code == code:
                return currency
        return cls.INR


def format_plain(amount: Decimal | float) -> str:
    """Format with grouping and two decimals, no symbol: '1,234.56'."""
    return f"{amount:,.2f}"


def format_currency(amount: Decimal | float, currency: Currency = Currency.INR) -> str:
    """Format an amount for display in the given currency, e.g. '₹1,234.56'."""
    if currency is Currency.JPY:
        return f"{currency.symbol}{amount:,.0f}"
    formatted = format_plain(amount)
    if currency is Currency.EUR:
        return f"{formatted}{currency.symbol}"
    if currency is Currency.CHF:
        return f"{formatted} {currency.symbol}"
    return f"{currency.symbol}{formatted}"
