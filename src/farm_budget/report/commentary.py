"""Narrative commentary selected from farm totals.

The policy is an ordered list of rules evaluated top to bottom; the first rule
whose predicate holds supplies the commentary. Thresholds use strict ``>`` so
a margin of exactly 25, 10 or 0 falls into the lower bucket.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from farm_budget.models import FarmTotals
from farm_budget.report.formatting import format_currency

ZERO_INCOME_WARNING = (
    "No gross income has been recorded for this farm. Add expected yields and "
    "prices for each enterprise to produce a meaningful budget analysis."
)

ADVISORY_DISCLAIMER = (
    "This analysis is based on the expected yields, prices and costs supplied "
    "with the budget. Actual results will vary with seasonal conditions and "
    "market movements. Consult your agronomist or financial advisor before "
    "making production or investment decisions."
)


@dataclass(frozen=True)
class CommentaryRule:
    """A (predicate, template) pair.

    Templates may reference ``{margin}`` (one decimal), ``{net}``, ``{gross}``
    and ``{costs}`` (currency, two decimals).
    """
    bucket: str
    applies: Callable[[FarmTotals], bool]
    template: str
    terminal: bool = False

    def render(self, totals: FarmTotals) -> str:
        return self.template.format(
            margin=f"{totals.farm_profit_margin:.1f}",
            net=format_currency(totals.total_net_income),
            gross=format_currency(totals.total_gross_income),
            costs=format_currency(totals.total_variable_costs),
        )


@dataclass(frozen=True)
class Commentary:
    bucket: str
    paragraphs: tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n\n".join(self.paragraphs)


COMMENTARY_RULES: tuple[CommentaryRule, ...] = (
    CommentaryRule(
        bucket="zero_income",
        applies=lambda t: t.total_gross_income <= 0,
        template=ZERO_INCOME_WARNING,
        terminal=True,
    ),
    CommentaryRule(
        bucket="excellent",
        applies=lambda t: t.farm_profit_margin > 25,
        template=(
            "Excellent result: the farm budget shows a profit margin of {margin}%. "
            "Net income of {net} on gross income of {gross} indicates a highly "
            "profitable operation with a strong buffer against poor seasons."
        ),
    ),
    CommentaryRule(
        bucket="good",
        applies=lambda t: t.farm_profit_margin > 10,
        template=(
            "Good result: the farm budget shows a profit margin of {margin}%. "
            "Net income of {net} leaves room to absorb moderate falls in price "
            "or yield."
        ),
    ),
    CommentaryRule(
        bucket="marginal",
        applies=lambda t: t.farm_profit_margin > 0,
        template=(
            "Marginal result: the profit margin of {margin}% is positive but thin. "
            "Variable costs of {costs} absorb most of the gross income of {gross}; "
            "review the largest cost categories, as a small change in price or "
            "yield could turn this budget into a loss."
        ),
    ),
    CommentaryRule(
        bucket="loss",
        applies=lambda t: True,
        template=(
            "Warning: this budget projects a loss, with a profit margin of "
            "{margin}% and net income of {net}. Variable costs of {costs} are not "
            "covered by the expected gross income of {gross}. Revisit costs, "
            "yields and prices before committing to this plan."
        ),
    ),
)


def select_commentary(
    totals: FarmTotals | Mapping[str, Any],
    rules: tuple[CommentaryRule, ...] = COMMENTARY_RULES,
) -> Commentary:
    """Return the commentary for `totals` using first-match-wins `rules`.

    The advisory disclaimer is appended unless the matching rule is terminal.
    """
    if not isinstance(totals, FarmTotals):
        totals = FarmTotals.model_validate(dict(totals))

    for rule in rules:
        if not rule.applies(totals):
            continue
        paragraphs = [rule.render(totals)]
        if not rule.terminal:
            paragraphs.append(ADVISORY_DISCLAIMER)
        return Commentary(bucket=rule.bucket, paragraphs=tuple(paragraphs))

    raise ValueError("Commentary rules must end with a catch-all rule")
