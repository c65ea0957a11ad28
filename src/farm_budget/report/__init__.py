"""Report compilation: commentary policy, formatting, PDF rendering and
re-extraction of farm totals from compiled documents.
"""

from farm_budget.report.commentary import Commentary, select_commentary
from farm_budget.report.compiler import BudgetReportCompiler, compile_report

__all__ = [
    "BudgetReportCompiler",
    "Commentary",
    "compile_report",
    "select_commentary",
]
