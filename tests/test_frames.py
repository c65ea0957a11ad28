from __future__ import annotations

import pytest

from farm_budget.aggregate.engine import aggregate
from farm_budget.aggregate.frames import ENTERPRISE_COLUMNS, category_frame, enterprise_frame


def test_enterprise_frame_rows(example_budget) -> None:
    df = enterprise_frame(aggregate(example_budget))
    assert list(df.columns) == ENTERPRISE_COLUMNS
    assert list(df["name"]) == ["Wheat", "Merino Ewes"]
    assert df["net_income"].sum() == 102_000


def test_enterprise_frame_empty() -> None:
    df = enterprise_frame(aggregate({"farmName": "F", "productionRegion": "R", "enterprises": []}))
    assert df.empty
    assert list(df.columns) == ENTERPRISE_COLUMNS


def test_category_frame_shares(example_budget) -> None:
    df = category_frame(aggregate(example_budget))
    assert len(df) == 14
    row = df.set_index("category").loc["fertilizer"]
    assert row["label"] == "Fertilizer"
    assert row["amount"] == 14_000
    assert row["share_pct"] == pytest.approx(14_000 / 39_000 * 100)
    assert df["share_pct"].sum() == pytest.approx(100)


def test_category_frame_without_costs() -> None:
    df = category_frame(aggregate({"farmName": "F", "productionRegion": "R", "enterprises": []}))
    assert (df["share_pct"] == 0).all()
