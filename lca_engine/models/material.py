from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from .enums import (
    BOUNDARY_STAGES,
    ImpactCategory,
    LifecycleStage,
    MaterialCategory,
    SystemBoundary,
    TransportMode,
)


@dataclass(frozen=True)
class MaterialLineItem:
    """One bill-of-materials line as supplied by product/recipe management.

    Read-only to the engine. ``source_reference`` points at a supplier
    product and enables the primary tier of factor resolution.
    """

    id: str
    name: str
    quantity: float
    unit: str
    stage: LifecycleStage
    category: MaterialCategory = MaterialCategory.OTHER
    origin: Optional[str] = None
    transport_mode: Optional[TransportMode] = None
    transport_distance_km: Optional[float] = None
    source_reference: Optional[str] = None

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError(f"quantity for '{self.name}' cannot be negative")
        if self.transport_distance_km is not None and self.transport_distance_km < 0:
            raise ValueError(f"transport distance for '{self.name}' cannot be negative")

    @property
    def has_transport_leg(self) -> bool:
        return (
            self.transport_mode is not None
            and self.transport_distance_km is not None
            and self.transport_distance_km > 0
        )


def duplicate_ids(items: Iterable[MaterialLineItem]) -> set[str]:
    seen: set[str] = set()
    duplicates: set[str] = set()
    for item in items:
        if item.id in seen:
            duplicates.add(item.id)
        seen.add(item.id)
    return duplicates


@dataclass(frozen=True)
class CalculationRun:
    """Immutable input snapshot for one calculation run.

    Every input the engine needs for a run is carried here or passed
    alongside it; nothing is read from ambient state.
    """

    run_id: str
    product_name: str
    materials: tuple[MaterialLineItem, ...]
    declared_output_mass: Optional[float] = None
    output_mass_unit: str = "kg"
    system_boundary: SystemBoundary = SystemBoundary.CRADLE_TO_GRAVE
    functional_unit: str = "1 unit"
    # Categories where blending provenance tiers has been disclosed.
    disclosed_tier_mixing: frozenset[ImpactCategory] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Accept any iterable from callers but store a tuple.
        if not isinstance(self.materials, tuple):
            object.__setattr__(self, "materials", tuple(self.materials))
        duplicates = sorted(duplicate_ids(self.materials))
        if duplicates:
            raise ValueError(f"material ids must be unique within a run: {', '.join(duplicates)}")
        if self.declared_output_mass is not None and self.declared_output_mass < 0:
            raise ValueError("declared_output_mass cannot be negative")

    @property
    def boundary_stages(self) -> tuple[LifecycleStage, ...]:
        return BOUNDARY_STAGES[self.system_boundary]


@dataclass(frozen=True)
class MeteredEntry:
    """A dated metered reading (utility, water, waste) for one metric."""

    metric_key: str
    entry_date: date
    quantity: float
    unit: str

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError(f"quantity for metric '{self.metric_key}' cannot be negative")
