from __future__ import annotations

CURRENCY_SYMBOLS = {
    "PKR": "₨",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
}


def currency_symbol(code: str) -> str:
    """Symbol for a currency code, or the code itself when unknown."""
    return CURRENCY_SYMBOLS.get((code or "").upper(), code)


def format_currency(amount: float, code: str) -> str:
    """
    "$1,234.50", "-€3.25"; unknown codes are used as the prefix ("CHF12.00").
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency_symbol(code)}{abs(amount):,.2f}"
