"""Immutable result and audit trail data structures."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

from lca_engine.models.enums import (
    FailureType,
    ImpactCategory,
    LifecycleStage,
    MaterialCategory,
    ProvenanceTier,
)

GWP_CH4_FOSSIL = 29.8
GWP_CH4_BIOGENIC = 27.2
GWP_N2O = 273.0


def _freeze(obj: object, *names: str) -> None:
    """Swap mapping fields for read-only views over private copies."""
    for name in names:
        object.__setattr__(obj, name, MappingProxyType(dict(getattr(obj, name))))


@dataclass(frozen=True)
class GHGBreakdown:
    """Greenhouse gas speciation of a climate total.

    Biogenic CO2e is always kept apart from fossil CO2e.
    """

    total_co2e: float = 0.0
    fossil_co2e: float = 0.0
    biogenic_co2e: float = 0.0
    dluc_co2e: float = 0.0
    ch4_fossil_kg: float = 0.0
    ch4_biogenic_kg: float = 0.0
    n2o_kg: float = 0.0
    method: str = "none"
    adjustment_co2e: float = 0.0

    @property
    def ch4_co2e(self) -> float:
        return self.ch4_fossil_kg * GWP_CH4_FOSSIL + self.ch4_biogenic_kg * GWP_CH4_BIOGENIC

    @property
    def n2o_co2e(self) -> float:
        return self.n2o_kg * GWP_N2O

    @property
    def reconciled_co2e(self) -> float:
        return math.fsum(
            [
                self.fossil_co2e,
                self.biogenic_co2e,
                self.dluc_co2e,
                self.ch4_fossil_kg * GWP_CH4_FOSSIL,
                self.ch4_biogenic_kg * GWP_CH4_BIOGENIC,
                self.n2o_kg * GWP_N2O,
            ]
        )

    @property
    def residual_co2e(self) -> float:
        return self.total_co2e - self.reconciled_co2e


def sum_breakdowns(breakdowns: list[GHGBreakdown]) -> GHGBreakdown:
    """Component-wise full-precision sum of several breakdowns."""
    if not breakdowns:
        return GHGBreakdown()
    methods = sorted({b.method for b in breakdowns})
    return GHGBreakdown(
        total_co2e=math.fsum(b.total_co2e for b in breakdowns),
        fossil_co2e=math.fsum(b.fossil_co2e for b in breakdowns),
        biogenic_co2e=math.fsum(b.biogenic_co2e for b in breakdowns),
        dluc_co2e=math.fsum(b.dluc_co2e for b in breakdowns),
        ch4_fossil_kg=math.fsum(b.ch4_fossil_kg for b in breakdowns),
        ch4_biogenic_kg=math.fsum(b.ch4_biogenic_kg for b in breakdowns),
        n2o_kg=math.fsum(b.n2o_kg for b in breakdowns),
        method=methods[0] if len(methods) == 1 else "mixed",
        adjustment_co2e=math.fsum(b.adjustment_co2e for b in breakdowns),
    )


@dataclass(frozen=True)
class ImpactResult:
    """Absolute impact of one material, in one stage, for one category."""

    material_id: str
    material_name: str
    stage: LifecycleStage
    category: ImpactCategory
    value: float
    unit: str


@dataclass(frozen=True)
class MaterialImpact:
    """Full-precision impacts of one resolved material."""

    material_id: str
    material_name: str
    stage: LifecycleStage
    material_category: MaterialCategory
    quantity: float
    unit: str
    impacts: Mapping[ImpactCategory, float]
    transport_co2e: float
    ghg: GHGBreakdown
    factor_id: str
    tier: ProvenanceTier
    confidence: float
    source_reference: str = ""
    methodology: str = ""

    def __post_init__(self) -> None:
        _freeze(self, "impacts")

    def value(self, category: ImpactCategory) -> float:
        """Category value for this material; climate includes its transport leg."""
        base = self.impacts.get(category, 0.0)
        if category == ImpactCategory.CLIMATE:
            return base + self.transport_co2e
        return base


@dataclass(frozen=True)
class FailedMaterial:
    """A material that could not be computed, with the reason."""

    material_id: str
    material_name: str
    error_type: FailureType
    reason: str


@dataclass(frozen=True)
class CategoryBreakdown:
    """One impact category's total with its stage and material breakdowns."""

    category: ImpactCategory
    unit: str
    total: float
    by_stage: Mapping[LifecycleStage, float]
    by_material: Mapping[str, float]

    def __post_init__(self) -> None:
        _freeze(self, "by_stage", "by_material")


@dataclass(frozen=True)
class ImpactAggregate:
    """Output of the aggregator, retaining full granularity."""

    materials: tuple[MaterialImpact, ...]
    results: tuple[ImpactResult, ...]
    categories: Mapping[ImpactCategory, CategoryBreakdown]
    ghg: GHGBreakdown
    failed: tuple[FailedMaterial, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "categories")

    def total(self, category: ImpactCategory) -> float:
        breakdown = self.categories.get(category)
        return breakdown.total if breakdown is not None else 0.0

    def breakdown(self, category: ImpactCategory) -> CategoryBreakdown:
        return self.categories[category]

    @property
    def resolved_ids(self) -> frozenset[str]:
        return frozenset(m.material_id for m in self.materials)


@dataclass(frozen=True)
class ContributionRecord:
    """One material's share of a category total."""

    material: str
    material_id: str
    stage: LifecycleStage
    absolute_value: float
    percentage: float
    is_significant: bool
    is_dominant: bool


@dataclass(frozen=True)
class CategoryContribution:
    """Ranked contribution analysis for one impact category."""

    category: ImpactCategory
    unit: str
    total: float
    records: tuple[ContributionRecord, ...]
    significant_issues: tuple[str, ...] = ()

    @property
    def dominant(self) -> tuple[ContributionRecord, ...]:
        return tuple(r for r in self.records if r.is_dominant)

    @property
    def significant(self) -> tuple[ContributionRecord, ...]:
        return tuple(r for r in self.records if r.is_significant)


@dataclass(frozen=True)
class SensitivityRecord:
    """Elasticity of a category total to a ±10% change in one material."""

    parameter: str
    material_id: str
    material_name: str
    category: ImpactCategory
    baseline_result: float
    result_min: float
    result_max: float
    sensitivity_ratio: float
    is_highly_sensitive: bool
    is_degenerate: bool = False


@dataclass(frozen=True)
class MassBalanceCheck:
    """Input vs declared output mass comparison, in kg."""

    assessed: bool
    input_kg: float
    output_kg: float
    variance_pct: float
    tolerance_pct: float
    valid: bool
    excluded_materials: tuple[str, ...] = ()


@dataclass(frozen=True)
class CompletenessSnapshot:
    """Stage coverage, data gaps, consistency issues and mass balance."""

    stage_coverage: Mapping[LifecycleStage, float]
    missing_data: Mapping[LifecycleStage, tuple[str, ...]]
    consistency_issues: tuple[str, ...]
    mass_balance: MassBalanceCheck
    methodology_consistent: bool
    overall_score: float

    def __post_init__(self) -> None:
        _freeze(self, "stage_coverage", "missing_data")

    @property
    def mass_balance_valid(self) -> bool:
        return self.mass_balance.valid

    @property
    def mass_balance_input_kg(self) -> float:
        return self.mass_balance.input_kg

    @property
    def mass_balance_output_kg(self) -> float:
        return self.mass_balance.output_kg

    @property
    def mass_balance_variance_pct(self) -> float:
        return self.mass_balance.variance_pct

    @property
    def uncovered_stages(self) -> tuple[LifecycleStage, ...]:
        return tuple(s for s, pct in self.stage_coverage.items() if pct == 0.0)


@dataclass(frozen=True)
class AnnualizationResult:
    """Full-year estimate for one metered metric."""

    metric_key: str
    unit: str
    total_recorded: float
    monthly_average: float
    annualized_estimate: float
    months_covered: int
    is_projection: bool
    confidence_tier: int
    months: tuple[str, ...] = ()


@dataclass(frozen=True)
class InterpretationResult:
    """Top-level immutable interpretation of one calculation run."""

    run_id: str
    version: int
    product_name: str
    generated_at: datetime
    methodology_id: str
    methodology_version: str
    impact_results: tuple[ImpactResult, ...]
    totals: Mapping[ImpactCategory, float]
    ghg: GHGBreakdown
    contributions: Mapping[ImpactCategory, CategoryContribution]
    sensitivity: tuple[SensitivityRecord, ...]
    completeness: CompletenessSnapshot
    significant_issues: tuple[str, ...]
    failed_materials: tuple[FailedMaterial, ...]
    key_findings: tuple[str, ...]
    limitations: tuple[str, ...]
    recommendations: tuple[str, ...]
    uncertainty_statement: str
    catalog_version: Optional[str] = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _freeze(self, "totals", "contributions")

    @property
    def completeness_score(self) -> float:
        return self.completeness.overall_score

    @property
    def methodology_consistent(self) -> bool:
        return self.completeness.methodology_consistent

    @property
    def mass_balance_valid(self) -> bool:
        return self.completeness.mass_balance_valid

    @property
    def highly_sensitive_parameters(self) -> tuple[str, ...]:
        return tuple(s.parameter for s in self.sensitivity if s.is_highly_sensitive)
