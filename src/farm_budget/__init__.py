"""farm_budget package.

Turns a farmer-submitted, per-enterprise budget into verified totals and a
paginated PDF report.

Architecture:
- Raw budget → Aggregation engine → verified `BudgetSummary` → Report compiler
- Pydantic models validate raw input structure and coerce numeric leaves
- ReportLab renders the document; pdfplumber reads totals back
- Dask runs independent per-order compilations in batch
"""

from farm_budget.aggregate.engine import aggregate
from farm_budget.models import BudgetStructureError, BudgetSummary, CostCategory, RawBudget
from farm_budget.pipeline import produce_report, produce_reports, produce_summary_and_report
from farm_budget.report.compiler import compile_report

__all__ = [
    "BudgetStructureError",
    "BudgetSummary",
    "CostCategory",
    "RawBudget",
    "__version__",
    "aggregate",
    "compile_report",
    "produce_report",
    "produce_reports",
    "produce_summary_and_report",
]
__version__ = "0.1.0"
