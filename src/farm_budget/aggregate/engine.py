"""Server-side aggregation of a raw farm budget.

`aggregate` is the single source of truth for every figure that ends up in a
report. It is recomputed from raw inputs on every call; totals that a client
may have attached to the submission are never read.

Expectations:
- Input: a decoded budget mapping (camelCase keys) or a `RawBudget`.
- Output: a frozen `BudgetSummary` with per-enterprise summaries, farm totals
  and farm-wide costs for each of the fourteen cost categories.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from farm_budget.models import (
    BudgetSummary,
    CostCategory,
    CostItem,
    EnterpriseSummary,
    FarmTotals,
    RawBudget,
    RawEnterprise,
    parse_budget,
)

log = logging.getLogger(__name__)

_CATEGORY_IDS = {c.value: c for c in CostCategory}


def profit_margin(gross_income: float, net_income: float) -> float:
    """Return net income as a percentage of gross income, 0 when gross is 0."""
    if gross_income == 0:
        return 0.0
    return net_income / gross_income * 100.0


def _rate(items: list[CostItem]) -> float:
    """Sum the per-unit totals of a category's items."""
    return sum(item.total for item in items)


def summarize_enterprise(
    enterprise: RawEnterprise,
    aggregated: dict[CostCategory, float] | None = None,
) -> EnterpriseSummary:
    """Build the verified summary for one enterprise.

    When `aggregated` is given, each known category's cost (rate x area) is
    added to it in the same pass.

    Args:
        enterprise: Validated raw enterprise.
        aggregated: Optional farm-wide per-category accumulator.

    Returns:
        Frozen `EnterpriseSummary`.
    """
    area = enterprise.area
    cost_rate = 0.0

    for category_id, items in enterprise.costs.items():
        category_rate = _rate(items)
        cost_rate += category_rate

        category = _CATEGORY_IDS.get(category_id)
        if category is None:
            log.warning(
                "Enterprise %r has unknown cost category %r; counted in its "
                "variable costs but not in farm category totals",
                enterprise.name,
                category_id,
            )
            continue
        if aggregated is not None:
            aggregated[category] += category_rate * area

    gross_income = area * enterprise.expected_yield_per_unit * enterprise.expected_price
    variable_costs = area * cost_rate
    net_income = gross_income - variable_costs

    return EnterpriseSummary(
        name=enterprise.name,
        area_label=enterprise.area_label,
        area=area,
        gross_income=gross_income,
        variable_costs=variable_costs,
        costs_per_unit=variable_costs / area if area > 0 else 0.0,
        net_income=net_income,
        profit_margin=profit_margin(gross_income, net_income),
        unit_label=enterprise.unit_label,
        costs=enterprise.costs,
    )


def farm_totals(gross_income: float, variable_costs: float) -> FarmTotals:
    """Return `FarmTotals` for completed farm-wide sums."""
    net_income = gross_income - variable_costs
    return FarmTotals(
        total_variable_costs=variable_costs,
        total_gross_income=gross_income,
        total_net_income=net_income,
        farm_profit_margin=profit_margin(gross_income, net_income),
    )


def aggregate(raw: RawBudget | Mapping[str, Any]) -> BudgetSummary:
    """Aggregate a raw budget into its verified summary.

    Numeric irregularities (missing, non-numeric or non-finite values) have
    already been coerced to zero by the raw models, so this never fails for
    them. An empty enterprise list yields all-zero totals.

    Raises:
        BudgetStructureError: if the budget's structure is malformed.
    """
    budget = parse_budget(raw)

    aggregated = {c: 0.0 for c in CostCategory}
    summaries: list[EnterpriseSummary] = []
    total_gross = 0.0
    total_variable = 0.0

    for enterprise in budget.enterprises:
        summary = summarize_enterprise(enterprise, aggregated)
        summaries.append(summary)
        total_gross += summary.gross_income
        total_variable += summary.variable_costs

    result = BudgetSummary(
        farm_name=budget.farm_name,
        production_region=budget.production_region,
        farm_totals=farm_totals(total_gross, total_variable),
        enterprise_summaries=tuple(summaries),
        aggregated_costs=aggregated,
    )

    log.info(
        "Aggregated %d enterprises for %r: gross=%.2f variable=%.2f",
        len(summaries),
        budget.farm_name,
        total_gross,
        total_variable,
    )
    return result
