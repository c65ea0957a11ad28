"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the service's environment variables (a `.env` file at the project root
is loaded first). The aggregation and report core never read settings; only
the CLI and dashboard do.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")


@dataclass(frozen=True)
class Settings:
    """Container for service configuration read from the environment.

    Attributes:
        output_dir: Directory the CLI writes compiled reports to.
        log_path: Log file path, or None to log to stdout only.
        log_level: Numeric logging level.
        report_author: Author recorded in PDF metadata.
    """
    output_dir: Path
    log_path: Path | None
    log_level: int
    report_author: str


def _parse_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise RuntimeError(
            f"FARM_BUDGET_LOG_LEVEL={name!r} is not a logging level "
            "(expected DEBUG, INFO, WARNING, ERROR or CRITICAL)."
        )
    return level


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `FARM_BUDGET_LOG_LEVEL` is not a valid level name.
    """
    output_dir = Path(os.getenv("FARM_BUDGET_OUTPUT_DIR", "reports"))
    log_path_raw = os.getenv("FARM_BUDGET_LOG_PATH", "logs/farm_budget.log").strip()
    log_level = _parse_level(os.getenv("FARM_BUDGET_LOG_LEVEL", "INFO"))
    report_author = os.getenv("FARM_BUDGET_REPORT_AUTHOR", "Farm Budget Service").strip()

    return Settings(
        output_dir=output_dir,
        log_path=Path(log_path_raw) if log_path_raw else None,
        log_level=log_level,
        report_author=report_author or "Farm Budget Service",
    )
