"""Display helpers for money and dates."""

from __future__ import annotations

import math
from datetime import date, datetime


def format_currency(amount: float | None, currency: str = "ETB") -> str:
    """Return *amount* as ``"ETB 1,234.50"``; missing or NaN amounts show as zero."""
    if amount is None or math.isnan(amount):
        amount = 0.0
    return f"{currency} {amount:,.2f}"


def format_date(value: date | datetime | None) -> str:
    """Return *value* as ``"Jan 5, 2026"``, or ``"N/A"`` when absent."""
    if value is None:
        return "N/A"
    return f"{value:%b} {value.day}, {value.year}"
