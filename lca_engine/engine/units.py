"""Unit normalisation and explicit conversion helpers.

The aggregator never converts: quantity and factor must already share a unit.
These helpers let a caller perform that conversion deliberately beforehand.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from lca_engine.errors import UnitMismatch
from lca_engine.models.material import MaterialLineItem

_ALIASES: dict[str, str] = {
    "kg": "kg",
    "kgs": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    "g": "g",
    "gram": "g",
    "grams": "g",
    "mg": "mg",
    "t": "t",
    "tonne": "t",
    "tonnes": "t",
    "lb": "lb",
    "lbs": "lb",
    "l": "l",
    "litre": "l",
    "litres": "l",
    "liter": "l",
    "liters": "l",
    "ml": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "m3": "m3",
    "m³": "m3",
    "kwh": "kwh",
    "mwh": "mwh",
    "unit": "unit",
    "units": "unit",
    "item": "unit",
    "items": "unit",
}

# Conversion to the base unit of each dimension (kg, l, kwh).
_MASS_TO_KG: dict[str, float] = {
    "kg": 1.0,
    "g": 0.001,
    "mg": 0.000001,
    "t": 1000.0,
    "lb": 0.45359237,
}
_VOLUME_TO_L: dict[str, float] = {
    "l": 1.0,
    "ml": 0.001,
    "m3": 1000.0,
}
_ENERGY_TO_KWH: dict[str, float] = {
    "kwh": 1.0,
    "mwh": 1000.0,
}
_DIMENSIONS = (_MASS_TO_KG, _VOLUME_TO_L, _ENERGY_TO_KWH)


def normalize_unit(unit: str) -> str:
    """Canonical spelling of a unit; unknown units are lower-cased and stripped."""
    key = (unit or "").strip().lower()
    return _ALIASES.get(key, key)


def same_unit(a: str, b: str) -> bool:
    return normalize_unit(a) == normalize_unit(b)


def is_mass_unit(unit: str) -> bool:
    return normalize_unit(unit) in _MASS_TO_KG


def _dimension_of(unit: str) -> Optional[dict[str, float]]:
    for table in _DIMENSIONS:
        if unit in table:
            return table
    return None


def convert_quantity(
    quantity: float, from_unit: str, to_unit: str, label: str = "quantity"
) -> float:
    """Convert between units of the same dimension.

    Raises UnitMismatch when the units are of different (or unknown) dimensions.
    """
    src = normalize_unit(from_unit)
    dst = normalize_unit(to_unit)
    if src == dst:
        return quantity
    table = _dimension_of(src)
    if table is None or dst not in table:
        raise UnitMismatch(label, from_unit, to_unit)
    return quantity * table[src] / table[dst]


def to_kg(quantity: float, unit: str, label: str = "quantity") -> float:
    return convert_quantity(quantity, unit, "kg", label=label)


def align_to_reference(item: MaterialLineItem, reference_unit: str) -> MaterialLineItem:
    """Return a copy of ``item`` expressed in ``reference_unit``."""
    if same_unit(item.unit, reference_unit):
        return item
    quantity = convert_quantity(item.quantity, item.unit, reference_unit, label=item.name)
    return replace(item, quantity=quantity, unit=normalize_unit(reference_unit))
