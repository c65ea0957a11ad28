"""Entry points consumed by the order-handling glue.

`produce_report` always runs the aggregation engine before compiling, so a
document is only ever built from server-side figures. `produce_reports`
compiles many orders as independent Dask tasks.

Module notes:
- Input is an already-decoded budget mapping; transport decoding, upload and
  notification belong to the caller.
- Nothing here touches the network, file system or a database.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Tuple, cast

from dask import delayed, compute  # type: ignore[attr-defined]

from farm_budget.aggregate.engine import aggregate
from farm_budget.models import BudgetStructureError, BudgetSummary, RawBudget
from farm_budget.report.compiler import compile_report

log = logging.getLogger(__name__)


def produce_summary_and_report(
    raw: RawBudget | Mapping[str, Any],
    generated_at: datetime | None = None,
    author: str | None = None,
) -> tuple[BudgetSummary, bytes]:
    """Aggregate `raw` and compile its report.

    Returns:
        The verified summary and the PDF bytes compiled from it.

    Raises:
        BudgetStructureError: if the budget's structure is malformed.
    """
    summary = aggregate(raw)
    return summary, compile_report(summary, generated_at=generated_at, author=author)


def produce_report(
    raw: RawBudget | Mapping[str, Any],
    generated_at: datetime | None = None,
    author: str | None = None,
) -> bytes:
    """Return the PDF report for a raw budget."""
    _, document = produce_summary_and_report(raw, generated_at=generated_at, author=author)
    return document


@dataclass
class BatchResult:
    """Outcome of `produce_reports`.

    Attributes:
        reports: PDF bytes per order id.
        failures: Error message per order id that failed.
    """
    reports: dict[str, bytes] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)


def _compile_order(
    order_id: str,
    raw: Any,
    generated_at: datetime | None,
    author: str | None,
) -> Tuple[str, bytes | None, str | None]:
    """Runs inside a worker (delayed task).

    Returns `(order_id, document, error)`; exactly one of document/error is set.
    """
    try:
        document = produce_report(raw, generated_at=generated_at, author=author)
    except BudgetStructureError as exc:
        log.error("Order %s rejected: %s", order_id, exc)
        return order_id, None, str(exc)
    except Exception as exc:
        # one order's failure must not abort the rest of the batch
        log.exception("Order %s failed", order_id)
        return order_id, None, f"{type(exc).__name__}: {exc}"
    return order_id, document, None


def produce_reports(
    orders: Mapping[str, Any],
    generated_at: datetime | None = None,
    author: str | None = None,
    scheduler: str = "processes",
) -> BatchResult:
    """Compile a report for every order independently.

    Each order is its own delayed task sharing no state with the others, so a
    malformed budget only fails its own order.

    Args:
        orders: Raw budget per order id.
        generated_at: Timestamp printed on every report; defaults to now.
        author: PDF metadata author.
        scheduler: Dask scheduler name ("processes", "threads" or
            "synchronous").
    """
    log.info("Compiling %d reports (scheduler=%s)", len(orders), scheduler)

    tasks = [
        delayed(_compile_order)(order_id, raw, generated_at, author)
        for order_id, raw in orders.items()
    ]
    # `compute` is untyped in our environment; cast to Any before calling
    results = cast(Any, compute)(*tasks, scheduler=scheduler) if tasks else ()

    batch = BatchResult()
    for order_id, document, error in results:
        if document is not None:
            batch.reports[order_id] = document
        else:
            batch.failures[order_id] = error or "unknown error"

    log.info(
        "Batch complete: good=%d bad=%d",
        len(batch.reports),
        len(batch.failures),
    )
    return batch
