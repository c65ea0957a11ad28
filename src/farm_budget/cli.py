"""Command-line interface for producing farm budget summaries and reports.

Provides subcommands: `summarize`, `report`, and `batch`. Each command is
implemented as a `cmd_*` function that accepts an argparse namespace.
Reading budget JSON from disk happens here; the core only ever sees decoded
mappings.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from farm_budget.aggregate.engine import aggregate
from farm_budget.config import get_settings
from farm_budget.logging_config import configure_logging
from farm_budget.models import BudgetStructureError
from farm_budget.pipeline import produce_reports, produce_summary_and_report

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _read_budget(path: Path) -> Any:
    """Load a decoded budget from a JSON file."""
    return json.loads(path.read_text(encoding="utf-8"))


# --------------------------------------------------
# SUMMARIZE
# --------------------------------------------------
def cmd_summarize(args: argparse.Namespace) -> None:
    """Print the verified summary of a budget file as JSON."""
    summary = aggregate(_read_budget(args.budget))
    indent = 2 if args.pretty else None
    print(json.dumps(summary.to_json_dict(), indent=indent))


# --------------------------------------------------
# REPORT
# --------------------------------------------------
def cmd_report(args: argparse.Namespace) -> None:
    """Compile a budget file into a PDF report."""
    s = get_settings()
    out = args.output or s.output_dir / f"{args.budget.stem}.pdf"

    summary, document = produce_summary_and_report(
        _read_budget(args.budget), author=s.report_author
    )
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(document)

    log.info(
        "Wrote %s (%d bytes, net income %.2f)",
        out,
        len(document),
        summary.farm_totals.total_net_income,
    )


# --------------------------------------------------
# BATCH
# --------------------------------------------------
def cmd_batch(args: argparse.Namespace) -> None:
    """Compile every `*.json` budget in a directory; the file stem is the order id."""
    s = get_settings()
    out_dir = args.output or s.output_dir

    orders = {p.stem: _read_budget(p) for p in sorted(args.directory.glob("*.json"))}
    if not orders:
        raise RuntimeError(f"No *.json budgets found in {args.directory}")

    batch = produce_reports(orders, author=s.report_author, scheduler=args.scheduler)

    out_dir.mkdir(parents=True, exist_ok=True)
    for order_id, document in batch.reports.items():
        (out_dir / f"{order_id}.pdf").write_bytes(document)

    for order_id, error in batch.failures.items():
        log.warning("Skipped %s: %s", order_id, error)

    if batch.failures:
        raise SystemExit(1)


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="farm-budget")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_summarize = sub.add_parser("summarize")
    p_summarize.add_argument("budget", type=Path)
    p_summarize.add_argument("--pretty", action="store_true")

    p_report = sub.add_parser("report")
    p_report.add_argument("budget", type=Path)
    p_report.add_argument("-o", "--output", type=Path, default=None)

    p_batch = sub.add_parser("batch")
    p_batch.add_argument("directory", type=Path)
    p_batch.add_argument("-o", "--output", type=Path, default=None)
    p_batch.add_argument(
        "--scheduler",
        choices=["processes", "threads", "synchronous"],
        default="processes",
    )

    return p


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    s = get_settings()
    args = build_parser().parse_args(argv)

    # keep stdout clean for JSON output
    if args.cmd == "summarize":
        logging.basicConfig(level=s.log_level, stream=sys.stderr)
    else:
        configure_logging(s.log_path, s.log_level)

    try:
        if args.cmd == "summarize":
            cmd_summarize(args)
        elif args.cmd == "report":
            cmd_report(args)
        elif args.cmd == "batch":
            cmd_batch(args)
        else:
            raise SystemExit(2)
    except (BudgetStructureError, json.JSONDecodeError, RuntimeError) as exc:
        log.error("%s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
