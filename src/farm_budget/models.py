"""Pydantic models for raw budget input and verified summary output.

Raw models are lenient on numeric leaves (missing, blank or non-numeric values
become ``0.0``) but strict on structure: a budget whose shape is wrong fails
fast with `BudgetStructureError`. Summary models are frozen and serialize to
the camelCase keys used on the wire.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel


class BudgetStructureError(ValueError):
    """Raised when a raw budget does not have the expected shape."""


class CostCategory(str, Enum):
    """Closed set of variable-cost categories shared by every enterprise."""
    LAND_PREP = "land_prep"
    SEED = "seed"
    FERTILIZER = "fertilizer"
    HERBICIDE = "herbicide"
    INSECTICIDE = "insecticide"
    FUNGICIDE = "fungicide"
    IRRIGATION = "irrigation"
    FUEL = "fuel"
    LABOUR = "labour"
    HARVESTING = "harvesting"
    FREIGHT = "freight"
    ANIMAL_HEALTH = "animal_health"
    FEED = "feed"
    MARKETING = "marketing"

    @property
    def label(self) -> str:
        return COST_CATEGORY_LABELS[self]


COST_CATEGORY_LABELS: dict[CostCategory, str] = {
    CostCategory.LAND_PREP: "Land Preparation",
    CostCategory.SEED: "Seed & Planting",
    CostCategory.FERTILIZER: "Fertilizer",
    CostCategory.HERBICIDE: "Herbicides",
    CostCategory.INSECTICIDE: "Insecticides",
    CostCategory.FUNGICIDE: "Fungicides",
    CostCategory.IRRIGATION: "Irrigation",
    CostCategory.FUEL: "Fuel & Oil",
    CostCategory.LABOUR: "Casual Labour",
    CostCategory.HARVESTING: "Harvesting",
    CostCategory.FREIGHT: "Freight & Cartage",
    CostCategory.ANIMAL_HEALTH: "Animal Health",
    CostCategory.FEED: "Feed & Supplements",
    CostCategory.MARKETING: "Marketing & Levies",
}


class EnterpriseType(str, Enum):
    CROP = "crop"
    LIVESTOCK = "livestock"


AREA_LABELS: dict[EnterpriseType, str] = {
    EnterpriseType.CROP: "Hectares",
    EnterpriseType.LIVESTOCK: "Head",
}

DEFAULT_UNITS: dict[EnterpriseType, str] = {
    EnterpriseType.CROP: "ha",
    EnterpriseType.LIVESTOCK: "head",
}


# ---------------------------------------------------------------------
# Lenient leaf coercion
# ---------------------------------------------------------------------
def coerce_number(value: Any) -> float:
    """Return ``value`` as a finite float, or ``0.0`` when it is not one.

    Booleans, ``None``, unparsable strings, NaN and infinities all become
    zero so that partially entered budgets still aggregate.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _coerce_enterprise_type(value: Any) -> Any:
    if value is None or value == "":
        return EnterpriseType.CROP
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _coerce_mapping(value: Any) -> Any:
    return {} if value is None else value


def _coerce_sequence(value: Any) -> Any:
    return () if value is None else value


def _coerce_items(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [item for item in value if item is not None]
    return value


def _complete_categories(value: Any) -> dict[str, float]:
    source: dict[str, Any] = {}
    if isinstance(value, Mapping):
        source = {(k.value if isinstance(k, Enum) else str(k)): v for k, v in value.items()}
    return {c.value: coerce_number(source.get(c.value)) for c in CostCategory}


Number = Annotated[float, BeforeValidator(coerce_number)]
Text = Annotated[str, BeforeValidator(_coerce_text)]


# ---------------------------------------------------------------------
# Raw input
# ---------------------------------------------------------------------
class CostItem(BaseModel):
    """One cost line; `total` is already normalized per hectare or per head."""
    model_config = ConfigDict(extra="allow", frozen=True)
    total: Number = 0.0
    name: Text = ""


CostItems = Annotated[list[CostItem], BeforeValidator(_coerce_items)]


class RawEnterprise(BaseModel):
    """A crop or livestock enterprise as submitted by the client.

    Any client-computed totals present on the record are ignored.
    """
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)
    name: Text = ""
    enterprise_type: Annotated[EnterpriseType, BeforeValidator(_coerce_enterprise_type)] = Field(
        EnterpriseType.CROP, alias="type"
    )
    unit: Text = ""
    area: Number = 0.0
    expected_yield_per_unit: Number = 0.0
    expected_price: Number = 0.0
    costs: Annotated[dict[str, CostItems], BeforeValidator(_coerce_mapping)] = Field(
        default_factory=dict
    )

    @property
    def unit_label(self) -> str:
        return self.unit or DEFAULT_UNITS[self.enterprise_type]

    @property
    def area_label(self) -> str:
        return AREA_LABELS[self.enterprise_type]


class RawBudget(BaseModel):
    """Top-level budget submitted for one order."""
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)
    farm_name: Text
    production_region: Text
    enterprises: list[RawEnterprise]


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def parse_budget(raw: RawBudget | Mapping[str, Any]) -> RawBudget:
    """Validate an already-decoded budget into a fresh `RawBudget`.

    Raises:
        BudgetStructureError: if the input is not a mapping or any required
            key, list or nested mapping is missing or of the wrong shape.
    """
    if isinstance(raw, RawBudget):
        return raw
    if not isinstance(raw, Mapping):
        raise BudgetStructureError(
            f"Budget must be a mapping, got {type(raw).__name__}"
        )
    try:
        return RawBudget.model_validate(dict(raw))
    except ValidationError as exc:
        raise BudgetStructureError(f"Malformed budget: {_describe(exc)}") from exc


# ---------------------------------------------------------------------
# Verified output
# ---------------------------------------------------------------------
class _Derived(BaseModel):
    model_config = ConfigDict(
        frozen=True, extra="ignore", alias_generator=to_camel, populate_by_name=True
    )


class EnterpriseSummary(_Derived):
    """Verified figures for one enterprise.

    Attributes:
        name: Enterprise name.
        area_label: "Hectares" for crops, "Head" for livestock.
        area: Hectares or head count.
        gross_income: area x expected yield x expected price.
        variable_costs: area x sum of every cost item total.
        costs_per_unit: variable costs per hectare/head, 0 when area is 0.
        net_income: gross income minus variable costs.
        profit_margin: net income as a percentage of gross income, 0 when
            gross income is 0.
        unit_label: Unit the per-unit costs are expressed in.
        costs: Echo of the input cost items, keyed by category id.
    """
    name: Text = ""
    area_label: Text = ""
    area: Number = 0.0
    gross_income: Number = 0.0
    variable_costs: Number = 0.0
    costs_per_unit: Number = 0.0
    net_income: Number = 0.0
    profit_margin: Number = 0.0
    unit_label: Text = ""
    costs: Annotated[dict[str, CostItems], BeforeValidator(_coerce_mapping)] = Field(
        default_factory=dict
    )


class FarmTotals(_Derived):
    total_variable_costs: Number = 0.0
    total_gross_income: Number = 0.0
    total_net_income: Number = 0.0
    farm_profit_margin: Number = 0.0


class BudgetSummary(_Derived):
    """Authoritative aggregation result for one budget."""
    farm_name: Text = ""
    production_region: Text = ""
    farm_totals: Annotated[FarmTotals, BeforeValidator(_coerce_mapping)] = Field(
        default_factory=FarmTotals
    )
    enterprise_summaries: Annotated[
        tuple[EnterpriseSummary, ...], BeforeValidator(_coerce_sequence)
    ] = ()
    aggregated_costs: Annotated[
        dict[CostCategory, float], BeforeValidator(_complete_categories)
    ] = Field(default_factory=lambda: {c: 0.0 for c in CostCategory})

    def to_json_dict(self) -> dict[str, Any]:
        """Return a JSON-safe dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
