"""Aggregation of raw farm budgets into verified summaries.

`engine.aggregate` recomputes every figure from raw inputs; `frames` offers
pandas views of the result for dashboards and exports.
"""

from farm_budget.aggregate.engine import aggregate

__all__ = ["aggregate"]
