"""Exceptions raised by the impact calculation and interpretation engine."""

from __future__ import annotations


class LCAEngineError(Exception):
    """Base class for all engine errors."""


class DataNotFound(LCAEngineError, LookupError):
    """No factor could be resolved for a material at any waterfall tier."""

    def __init__(self, material_name: str, category: str | None = None):
        self.material_name = material_name
        self.category = category
        detail = f" (category '{category}')" if category else ""
        super().__init__(
            f"No emission factor found for material '{material_name}'{detail}"
        )


class UnitMismatch(LCAEngineError, ValueError):
    """A quantity and its factor are expressed in incompatible units."""

    def __init__(self, material_name: str, unit: str, expected_unit: str):
        self.material_name = material_name
        self.unit = unit
        self.expected_unit = expected_unit
        super().__init__(
            f"Unit mismatch for '{material_name}': quantity in '{unit}', "
            f"factor expects '{expected_unit}'"
        )


class CatalogUnavailable(LCAEngineError, RuntimeError):
    """The factor catalog could not be obtained; no run is possible."""
