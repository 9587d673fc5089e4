"""fr-FR display formatting for amounts and hours."""

from __future__ import annotations

GROUP_SEPARATOR = "\u202f"  # narrow no-break space, as fr-FR
NBSP = "\u00a0"
CURRENCY_SYMBOL = "€"


def format_number(value: float, decimals: int = 0) -> str:
    """1234567.891 -> '1 234 568' (or '1 234 567,89' with decimals=2)."""
    text = f"{value:,.{decimals}f}"
    return text.replace(",", GROUP_SEPARATOR).replace(".", ",")


def format_currency(value: float, decimals: int = 0) -> str:
    return f"{format_number(value, decimals)}{NBSP}{CURRENCY_SYMBOL}"


def format_hours(value: float) -> str:
    return f"{format_number(value)}{NBSP}h"
