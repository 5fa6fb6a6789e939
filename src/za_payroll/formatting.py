"""Display formatting for South African payslips.

Amounts follow the en-ZA convention: space as thousands separator and comma
as decimal mark, e.g. "R 25 000,00".
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from za_payroll.calculators.types import Number, to_decimal

CURRENCY_SYMBOL = "R"

_EN_ZA_SEPARATORS = str.maketrans({",": " ", ".": ","})


def format_currency(amount: Number) -> str:
    """Format a ZAR amount with 2 decimal places."""
    value = to_decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    digits = f"{abs(value):,.2f}".translate(_EN_ZA_SEPARATORS)
    return f"{sign}{CURRENCY_SYMBOL} {digits}"


def format_percentage(rate: Number) -> str:
    """Format a fraction as a percentage with 1 to 2 decimals (0.18 -> "18,0%")."""
    percent = (to_decimal(rate) * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{percent:,.2f}"
    if text.endswith("0"):
        text = text[:-1]
    return f"{text.translate(_EN_ZA_SEPARATORS)}%"
