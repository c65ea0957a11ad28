from __future__ import annotations

from typing import Any

import pytest


@pytest.fixture
def example_budget() -> dict[str, Any]:
    """Two enterprises with figures that are exact in binary floating point.

    Wheat: gross 105,000, variable 25,000. Ewes: gross 36,000, variable 14,000.
    """
    return {
        "farmName": "Riverbend Farm",
        "productionRegion": "Central West",
        "enterprises": [
            {
                "name": "Wheat",
                "type": "crop",
                "unit": "ha",
                "area": 100,
                "expectedYieldPerUnit": 3.5,
                "expectedPrice": 300,
                "costs": {
                    "seed": [{"name": "Wheat seed", "total": 45}],
                    "fertilizer": [
                        {"name": "Urea", "total": 80},
                        {"name": "MAP", "total": 60},
                    ],
                    "herbicide": [{"name": "Glyphosate", "total": 15}],
                    "harvesting": [{"name": "Contract header", "total": 50}],
                },
            },
            {
                "name": "Merino Ewes",
                "type": "livestock",
                "unit": "head",
                "area": 500,
                "expectedYieldPerUnit": 6,
                "expectedPrice": 12,
                "costs": {
                    "animal_health": [{"name": "Drench", "total": 4.5}],
                    "feed": [{"name": "Hay", "total": 20}],
                    "marketing": [{"name": "Wool levy", "total": 3.5}],
                },
            },
        ],
    }


@pytest.fixture
def single_enterprise_budget() -> dict[str, Any]:
    """area=10, yield=5, price=20, cost items summing to 6 per hectare."""
    return {
        "farmName": "Hilltop",
        "productionRegion": "Tablelands",
        "enterprises": [
            {
                "name": "Canola",
                "type": "crop",
                "unit": "ha",
                "area": 10,
                "expectedYieldPerUnit": 5,
                "expectedPrice": 20,
                "costs": {
                    "seed": [{"total": 2}],
                    "fertilizer": [{"total": 4}],
                },
            }
        ],
    }
