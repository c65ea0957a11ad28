"""Fixed-locale number and date formatting for reports.

All helpers accept ``None`` and non-finite values and render them as zero so
that a document can always be produced.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from farm_budget.models import coerce_number

CURRENCY_SYMBOL = "$"
TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M"


def format_currency(value: Any) -> str:
    """Format as ``$1,234.56`` (negatives as ``-$1,234.56``)."""
    amount = round(coerce_number(value), 2)
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(amount):,.2f}"


def format_percent(value: Any, decimals: int = 2) -> str:
    """Format as a percentage with a fixed number of decimals, e.g. ``94.00%``."""
    pct = round(coerce_number(value), decimals)
    if pct == 0:
        pct = 0.0  # avoid "-0.00%"
    return f"{pct:.{decimals}f}%"


def format_quantity(value: Any) -> str:
    """Format an area or head count with thousands separators."""
    qty = coerce_number(value)
    if qty.is_integer():
        return f"{qty:,.0f}"
    return f"{qty:,.2f}"


def format_timestamp(moment: datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)
