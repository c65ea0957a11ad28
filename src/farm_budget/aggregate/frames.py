"""Tabular pandas views of a verified `BudgetSummary`.

These are for consumers that want the numbers without a document (the
dashboard and the CLI). They only reshape; no figure is recomputed here.
"""
from __future__ import annotations

import pandas as pd

from farm_budget.models import BudgetSummary, CostCategory

ENTERPRISE_COLUMNS = [
    "name",
    "area_label",
    "area",
    "unit_label",
    "gross_income",
    "variable_costs",
    "costs_per_unit",
    "net_income",
    "profit_margin",
]


def enterprise_frame(summary: BudgetSummary) -> pd.DataFrame:
    """Return one row per enterprise in input order.

    Returns:
        DataFrame with columns listed in `ENTERPRISE_COLUMNS`.
    """
    rows = [
        {col: getattr(ent, col) for col in ENTERPRISE_COLUMNS}
        for ent in summary.enterprise_summaries
    ]
    return pd.DataFrame(rows, columns=ENTERPRISE_COLUMNS)


def category_frame(summary: BudgetSummary) -> pd.DataFrame:
    """Return farm-wide variable costs per category.

    Returns:
        DataFrame with columns `category`, `label`, `amount`, `share_pct`
        (share of total variable costs, 0 when there are none), one row for
        each of the fourteen categories.
    """
    pdf = pd.DataFrame(
        [
            {
                "category": c.value,
                "label": c.label,
                "amount": summary.aggregated_costs.get(c, 0.0),
            }
            for c in CostCategory
        ]
    )
    total = pdf["amount"].sum()
    pdf["share_pct"] = pdf["amount"] / total * 100.0 if total else 0.0
    return pdf
