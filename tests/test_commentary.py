from __future__ import annotations

import pytest

from farm_budget.models import FarmTotals
from farm_budget.report.commentary import (
    ADVISORY_DISCLAIMER,
    ZERO_INCOME_WARNING,
    CommentaryRule,
    select_commentary,
)


def _totals(gross: float, margin: float) -> FarmTotals:
    return FarmTotals(
        total_gross_income=gross,
        total_variable_costs=0,
        total_net_income=gross * margin / 100,
        farm_profit_margin=margin,
    )


@pytest.mark.parametrize(
    "margin, bucket",
    [
        (94.0, "excellent"),
        (25.01, "excellent"),
        (25, "good"),
        (10.5, "good"),
        (10, "marginal"),
        (0.1, "marginal"),
        (0, "loss"),
        (-40, "loss"),
    ],
)
def test_margin_thresholds(margin, bucket) -> None:
    c = select_commentary(_totals(1000, margin))
    assert c.bucket == bucket
    assert c.paragraphs[-1] == ADVISORY_DISCLAIMER


@pytest.mark.parametrize("margin", [94.0, 0, -20])
def test_zero_income_is_terminal(margin) -> None:
    c = select_commentary(_totals(0, margin))
    assert c.bucket == "zero_income"
    assert c.paragraphs == (ZERO_INCOME_WARNING,)
    assert c.text == ZERO_INCOME_WARNING


def test_negative_gross_income_is_zero_income_branch() -> None:
    assert select_commentary(_totals(-50, 10)).bucket == "zero_income"


def test_text_formats_margin_and_currency() -> None:
    totals = FarmTotals(
        total_gross_income=1000,
        total_variable_costs=60,
        total_net_income=940,
        farm_profit_margin=94.0,
    )
    first = select_commentary(totals).paragraphs[0]
    assert "94.0%" in first
    assert "$940.00" in first
    assert "$1,000.00" in first


def test_accepts_camel_case_mapping() -> None:
    c = select_commentary({"totalGrossIncome": 500, "farmProfitMargin": 12})
    assert c.bucket == "good"


def test_rules_without_catch_all_raise() -> None:
    rules = (CommentaryRule(bucket="never", applies=lambda t: False, template="x"),)
    with pytest.raises(ValueError):
        select_commentary(_totals(1000, 50), rules=rules)
