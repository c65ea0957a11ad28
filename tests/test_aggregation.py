from __future__ import annotations

import copy

import pytest

from farm_budget.aggregate.engine import aggregate
from farm_budget.models import CostCategory


def test_single_enterprise_figures(single_enterprise_budget) -> None:
    s = aggregate(single_enterprise_budget)
    ent = s.enterprise_summaries[0]
    assert ent.gross_income == 1000
    assert ent.variable_costs == 60
    assert ent.net_income == 940
    assert ent.profit_margin == pytest.approx(94.0)
    assert ent.costs_per_unit == 6
    assert s.farm_totals.farm_profit_margin == pytest.approx(94.0)


def test_empty_enterprises_gives_zero_totals() -> None:
    s = aggregate({"farmName": "Empty", "productionRegion": "Nowhere", "enterprises": []})
    assert s.enterprise_summaries == ()
    t = s.farm_totals
    assert (t.total_gross_income, t.total_variable_costs, t.total_net_income, t.farm_profit_margin) == (0, 0, 0, 0)
    assert set(s.aggregated_costs) == set(CostCategory)
    assert all(v == 0 for v in s.aggregated_costs.values())


def test_farm_totals_are_sums_of_enterprises(example_budget) -> None:
    s = aggregate(example_budget)
    assert s.farm_totals.total_gross_income == 141_000
    assert s.farm_totals.total_variable_costs == 39_000
    assert s.farm_totals.total_net_income == 102_000
    assert s.farm_totals.farm_profit_margin == pytest.approx(102_000 / 141_000 * 100)
    for ent in s.enterprise_summaries:
        assert ent.net_income == ent.gross_income - ent.variable_costs


def test_reordering_changes_order_not_totals(example_budget) -> None:
    reordered = copy.deepcopy(example_budget)
    reordered["enterprises"].reverse()

    a = aggregate(example_budget)
    b = aggregate(reordered)
    assert a.farm_totals == b.farm_totals
    assert a.aggregated_costs == b.aggregated_costs
    assert [e.name for e in b.enterprise_summaries] == ["Merino Ewes", "Wheat"]


def test_aggregated_costs_by_category(example_budget) -> None:
    example_budget["enterprises"][1]["costs"]["seed"] = [{"total": 1}]
    s = aggregate(example_budget)
    costs = s.aggregated_costs
    assert costs[CostCategory.SEED] == 100 * 45 + 500 * 1
    assert costs[CostCategory.FERTILIZER] == 14_000
    assert costs[CostCategory.ANIMAL_HEALTH] == 2_250
    assert costs[CostCategory.FEED] == 10_000
    assert costs[CostCategory.IRRIGATION] == 0
    assert sum(costs.values()) == s.farm_totals.total_variable_costs


def test_zero_gross_income_has_zero_margin() -> None:
    s = aggregate({
        "farmName": "F",
        "productionRegion": "R",
        "enterprises": [
            {"name": "Fallow", "area": 20, "expectedYieldPerUnit": 0, "expectedPrice": 300,
             "costs": {"herbicide": [{"total": 12}]}},
        ],
    })
    ent = s.enterprise_summaries[0]
    assert ent.gross_income == 0
    assert ent.variable_costs == 240
    assert ent.net_income == -240
    assert ent.profit_margin == 0
    assert s.farm_totals.farm_profit_margin == 0


def test_zero_area_has_zero_costs_per_unit() -> None:
    s = aggregate({
        "farmName": "F",
        "productionRegion": "R",
        "enterprises": [{"name": "Barley", "area": 0, "costs": {"seed": [{"total": 40}]}}],
    })
    ent = s.enterprise_summaries[0]
    assert ent.variable_costs == 0
    assert ent.costs_per_unit == 0


def test_missing_and_non_numeric_values_become_zero() -> None:
    s = aggregate({
        "farmName": "F",
        "productionRegion": "R",
        "enterprises": [
            {
                "name": "Oats",
                "area": "12.5",
                "expectedYieldPerUnit": None,
                "expectedPrice": "n/a",
                "costs": {"seed": [{"total": "8"}, {}, {"total": float("nan")}]},
            },
            {"name": "Sorghum"},
            {"name": "Barley", "area": 4, "expectedYieldPerUnit": 2, "expectedPrice": 10**400,
             "costs": {"seed": [{"total": 10**400}, {"total": 3}]}},
        ],
    })
    oats, sorghum, barley = s.enterprise_summaries
    assert oats.area == 12.5
    assert oats.gross_income == 0
    assert oats.variable_costs == 100
    assert sorghum.gross_income == 0
    assert sorghum.variable_costs == 0
    assert sorghum.unit_label == "ha"
    assert barley.gross_income == 0
    assert barley.variable_costs == 12
    assert barley.profit_margin == 0


def test_unknown_category_counts_in_enterprise_only(caplog) -> None:
    s = aggregate({
        "farmName": "F",
        "productionRegion": "R",
        "enterprises": [
            {"name": "Lucerne", "area": 10, "costs": {"seed": [{"total": 5}], "contractor": [{"total": 3}]}},
        ],
    })
    assert s.enterprise_summaries[0].variable_costs == 80
    assert sum(s.aggregated_costs.values()) == 50
    assert "contractor" in caplog.text


def test_client_totals_are_ignored(single_enterprise_budget) -> None:
    single_enterprise_budget["farmTotals"] = {"totalGrossIncome": 999_999}
    single_enterprise_budget["enterprises"][0]["grossIncome"] = 5
    s = aggregate(single_enterprise_budget)
    assert s.farm_totals.total_gross_income == 1000
    assert s.enterprise_summaries[0].gross_income == 1000


def test_raw_input_is_not_mutated(example_budget) -> None:
    before = copy.deepcopy(example_budget)
    aggregate(example_budget)
    assert example_budget == before


def test_livestock_labels(example_budget) -> None:
    ewes = aggregate(example_budget).enterprise_summaries[1]
    assert ewes.area_label == "Head"
    assert ewes.unit_label == "head"
    assert ewes.costs_per_unit == 28


def test_null_cost_lists_and_items_contribute_zero() -> None:
    s = aggregate({
        "farmName": "F",
        "productionRegion": "R",
        "enterprises": [
            {"name": "Peas", "area": 10,
             "costs": {"seed": None, "fertilizer": [{"total": 2}, None], "fuel": [None]}},
        ],
    })
    ent = s.enterprise_summaries[0]
    assert ent.variable_costs == 20
    assert s.aggregated_costs[CostCategory.SEED] == 0
    assert s.aggregated_costs[CostCategory.FERTILIZER] == 20
    assert ent.costs["seed"] == []


@pytest.mark.parametrize("total", [-25.0, 0.0, 1e300])
def test_zero_gross_margin_regardless_of_costs(total) -> None:
    s = aggregate({
        "farmName": "F",
        "productionRegion": "R",
        "enterprises": [
            {"name": "Fallow", "area": 10, "expectedYieldPerUnit": 0, "expectedPrice": 250,
             "costs": {"herbicide": [{"total": total}]}},
            {"name": "Pasture", "area": 5, "costs": {"feed": [{"total": -total}]}},
        ],
    })
    for ent in s.enterprise_summaries:
        assert ent.gross_income == 0
        assert ent.profit_margin == 0
    assert s.farm_totals.total_gross_income == 0
    assert s.farm_totals.farm_profit_margin == 0
