"""Money display helpers."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

DEFAULT_CURRENCY = "KES"

CURRENCY_SYMBOLS = {
    "KES": "Ksh",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


def currency_symbol(currency_code: str | None = None) -> str:
    code = (currency_code or DEFAULT_CURRENCY).upper()
    return CURRENCY_SYMBOLS.get(code, CURRENCY_SYMBOLS[DEFAULT_CURRENCY])


def format_currency(amount: Any, currency_code: str | None = DEFAULT_CURRENCY) -> str:
    """``format_currency(2500, "KES") -> "Ksh 2,500.00"``.

    Unknown codes fall back to KES; anything non-numeric renders as 0.00.
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        value = Decimal("0")
    if not value.is_finite():
        value = Decimal("0")
    symbol = currency_symbol(currency_code)
    separator = "" if symbol in ("$", "€", "£") else " "
    return f"{symbol}{separator}{value:,.2f}"
