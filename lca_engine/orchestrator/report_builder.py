"""Interpretation report builder -- runs the full pipeline for one calculation run.

Resolver -> Aggregator (with speciation) -> {Contribution, Sensitivity,
Completeness} -> narrative rules -> InterpretationResult.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from lca_engine.engine import (
    CompletenessChecker,
    ContributionAnalyzer,
    GHGSpeciator,
    ImpactAggregator,
    SensitivityAnalyzer,
)
from lca_engine.engine.result import (
    CategoryContribution,
    InterpretationResult,
    SensitivityRecord,
)
from lca_engine.engine.units import align_to_reference, same_unit
from lca_engine.errors import CatalogUnavailable, UnitMismatch
from lca_engine.interpretation import (
    InterpretationContext,
    generate_narrative,
    uncertainty_statement,
)
from lca_engine.methodology.loader import get_default_methodology
from lca_engine.methodology.schema import MethodologyConfig
from lca_engine.models.enums import ImpactCategory, NarrativeSection
from lca_engine.models.factor import FactorCatalog, FactorRecord
from lca_engine.models.material import CalculationRun, MaterialLineItem
from lca_engine.resolver import FactorResolver

logger = logging.getLogger(__name__)


class InterpretationReportBuilder:
    """Stateless orchestrator that turns a run and a catalog snapshot into an
    immutable InterpretationResult.

    Every call produces a fresh result; nothing is cached between runs, so
    concurrent builds for different runs need no locking.
    """

    def __init__(self, config: Optional[MethodologyConfig] = None):
        self.config = config or get_default_methodology()
        self._speciator = GHGSpeciator(
            self.config.speciation.profiles,
            tolerance_pct=self.config.speciation.tolerance_pct,
        )
        self._aggregator = ImpactAggregator(self._speciator, self.config.transport_factors)
        self._contribution = ContributionAnalyzer(
            dominant_pct=self.config.contribution.dominant_pct,
            significant_pct=self.config.contribution.significant_pct,
        )
        self._sensitivity = SensitivityAnalyzer(
            highly_sensitive_threshold=self.config.sensitivity.highly_sensitive_threshold,
            top_n=self.config.sensitivity.top_n,
        )
        self._completeness = CompletenessChecker(
            expected_stages=self.config.completeness.expected_stages,
            mass_balance_tolerance_pct=self.config.completeness.mass_balance_tolerance_pct,
            low_confidence_threshold=self.config.completeness.low_confidence_threshold,
        )

    def build(
        self,
        run: CalculationRun,
        catalog: Optional[FactorCatalog],
        *,
        generated_at: Optional[datetime] = None,
        version: int = 1,
        convert_units: bool = False,
    ) -> InterpretationResult:
        """Interpret one run against one catalog snapshot.

        Raises CatalogUnavailable when there is no catalog to resolve against.
        Everything else (unresolvable materials, unit mismatches, mass-balance
        failures) is collected into the result.
        """
        if catalog is None or catalog.is_empty:
            logger.error(f"Factor catalog unavailable for run '{run.run_id}'")
            raise CatalogUnavailable(
                f"No factor catalog available for run '{run.run_id}'"
            )
        if version < 1:
            raise ValueError(f"version must be >= 1, got {version}")

        logger.info(
            f"Interpreting run '{run.run_id}' ({len(run.materials)} materials) "
            f"against catalog {catalog.version}"
        )
        warnings: list[str] = []

        resolver = FactorResolver.from_catalog(catalog, self.config.resolver)
        pairs, failed = resolver.resolve_all(run.materials)
        if convert_units:
            pairs = [self._align(item, factor, warnings) for item, factor in pairs]

        aggregate = self._aggregator.aggregate(pairs, failed)
        warnings.extend(f"{f.material_name}: {f.reason}" for f in aggregate.failed)

        contributions: dict[ImpactCategory, CategoryContribution] = {
            category: self._contribution.analyze(aggregate.breakdown(category), aggregate.materials)
            for category in ImpactCategory
        }

        sensitivity: list[SensitivityRecord] = []
        for category in self.config.sensitivity.categories:
            sensitivity.extend(self._sensitivity.analyze(contributions[category]))

        completeness = self._completeness.check(
            run.materials,
            aggregate,
            declared_output_mass=run.declared_output_mass,
            output_unit=run.output_mass_unit,
            disclosed_tier_mixing=run.disclosed_tier_mixing,
            stages=run.boundary_stages,
        )

        significant_issues: list[str] = []
        for category in ImpactCategory:
            significant_issues.extend(contributions[category].significant_issues)
        significant_issues.extend(completeness.consistency_issues)

        totals = {category: aggregate.total(category) for category in ImpactCategory}
        ctx = InterpretationContext(
            product_name=run.product_name,
            functional_unit=run.functional_unit,
            system_boundary=run.system_boundary,
            materials=aggregate.materials,
            totals=totals,
            ghg=aggregate.ghg,
            contributions=contributions,
            sensitivity=tuple(sensitivity),
            completeness=completeness,
            failed_materials=aggregate.failed,
            low_confidence_threshold=self.config.completeness.low_confidence_threshold,
        )
        narrative = generate_narrative(ctx)

        return InterpretationResult(
            run_id=run.run_id,
            version=version,
            product_name=run.product_name,
            generated_at=generated_at or datetime.now(timezone.utc),
            methodology_id=self.config.id,
            methodology_version=self.config.version,
            impact_results=aggregate.results,
            totals=totals,
            ghg=aggregate.ghg,
            contributions=contributions,
            sensitivity=tuple(sensitivity),
            completeness=completeness,
            significant_issues=tuple(significant_issues),
            failed_materials=aggregate.failed,
            key_findings=narrative[NarrativeSection.FINDING],
            limitations=narrative[NarrativeSection.LIMITATION],
            recommendations=narrative[NarrativeSection.RECOMMENDATION],
            uncertainty_statement=uncertainty_statement(ctx),
            catalog_version=catalog.version,
            warnings=tuple(warnings),
        )

    @staticmethod
    def _align(
        item: MaterialLineItem, factor: FactorRecord, warnings: list[str]
    ) -> tuple[MaterialLineItem, FactorRecord]:
        """Convert ``item`` into the factor's reference unit when possible."""
        if same_unit(item.unit, factor.reference_unit):
            return item, factor
        try:
            aligned = align_to_reference(item, factor.reference_unit)
        except UnitMismatch:
            # Left unconverted; the aggregator records the mismatch.
            return item, factor
        warnings.append(
            f"{item.name}: converted {item.quantity:g} {item.unit} to "
            f"{aligned.quantity:g} {aligned.unit}"
        )
        return aligned, factor
