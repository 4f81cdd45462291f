from __future__ import annotations

from dataclasses import dataclass

from lca_engine.engine.result import (
    CategoryContribution,
    CompletenessSnapshot,
    FailedMaterial,
    GHGBreakdown,
    MaterialImpact,
    SensitivityRecord,
)
from lca_engine.models.enums import ImpactCategory, ProvenanceTier, SystemBoundary


@dataclass(frozen=True)
class InterpretationContext:
    """Everything the narrative rules may read for one run."""

    product_name: str
    functional_unit: str
    system_boundary: SystemBoundary
    materials: tuple[MaterialImpact, ...]
    totals: dict[ImpactCategory, float]
    ghg: GHGBreakdown
    contributions: dict[ImpactCategory, CategoryContribution]
    sensitivity: tuple[SensitivityRecord, ...]
    completeness: CompletenessSnapshot
    failed_materials: tuple[FailedMaterial, ...]
    low_confidence_threshold: float = 0.5

    @property
    def has_data(self) -> bool:
        return bool(self.materials)

    @property
    def highly_sensitive(self) -> tuple[SensitivityRecord, ...]:
        return tuple(s for s in self.sensitivity if s.is_highly_sensitive)

    @property
    def low_confidence_materials(self) -> tuple[MaterialImpact, ...]:
        return tuple(m for m in self.materials if m.confidence < self.low_confidence_threshold)

    def materials_in_tier(self, tier: ProvenanceTier) -> tuple[MaterialImpact, ...]:
        return tuple(m for m in self.materials if m.tier == tier)
