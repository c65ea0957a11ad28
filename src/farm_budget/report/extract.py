"""
Structured re-extraction of farm totals from a compiled report.

Reads the text of the title/summary page with pdfplumber and parses the four
farm-total rows back into a `FarmTotals`. Used to check that a document
carries the same figures as the summary it was compiled from.
"""
from __future__ import annotations

import io
import logging
import re

import pdfplumber

from farm_budget.models import FarmTotals
from farm_budget.report.compiler import (
    LABEL_GROSS_INCOME,
    LABEL_NET_INCOME,
    LABEL_PROFIT_MARGIN,
    LABEL_VARIABLE_COSTS,
)

logger = logging.getLogger(__name__)

_CURRENCY = r"(-?)\$([\d,]+\.\d{2})"
_PERCENT = r"(-?[\d,]+\.\d{2})%"

_FIELDS = {
    "total_gross_income": re.compile(rf"^{re.escape(LABEL_GROSS_INCOME)}\s+{_CURRENCY}", re.M),
    "total_variable_costs": re.compile(rf"^{re.escape(LABEL_VARIABLE_COSTS)}\s+{_CURRENCY}", re.M),
    "total_net_income": re.compile(rf"^{re.escape(LABEL_NET_INCOME)}\s+{_CURRENCY}", re.M),
}
_MARGIN_RE = re.compile(rf"^{re.escape(LABEL_PROFIT_MARGIN)}\s+{_PERCENT}", re.M)


class ReportExtractionError(ValueError):
    """Raised when a document does not carry the expected farm-total rows."""


def _parse_amount(text: str) -> float:
    return float(text.replace(",", ""))


def summary_page_text(document: bytes) -> str:
    """Return the extracted text of the first page of a PDF document."""
    with pdfplumber.open(io.BytesIO(document)) as pdf:
        if not pdf.pages:
            return ""
        return pdf.pages[0].extract_text() or ""


def extract_farm_totals(document: bytes) -> FarmTotals:
    """Parse farm totals from the summary page of a compiled report.

    Raises:
        ReportExtractionError: if any of the four farm-total rows is missing.
    """
    text = summary_page_text(document)
    values: dict[str, float] = {}

    for field, pattern in _FIELDS.items():
        match = pattern.search(text)
        if not match:
            raise ReportExtractionError(f"Summary page has no {field} row")
        sign, amount = match.groups()
        values[field] = -_parse_amount(amount) if sign else _parse_amount(amount)

    margin = _MARGIN_RE.search(text)
    if not margin:
        raise ReportExtractionError("Summary page has no farm_profit_margin row")
    values["farm_profit_margin"] = _parse_amount(margin.group(1))

    logger.debug("Extracted farm totals: %s", values)
    return FarmTotals(**values)
