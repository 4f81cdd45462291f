"""Core impact aggregation.

Takes resolved (line item, factor) pairs -> produces an ImpactAggregate with
per-category totals broken down by stage and by material.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Iterable, Mapping, Optional, Sequence

from lca_engine.engine import units
from lca_engine.engine.result import (
    CategoryBreakdown,
    FailedMaterial,
    ImpactAggregate,
    ImpactResult,
    MaterialImpact,
    sum_breakdowns,
)
from lca_engine.engine.speciation import GHGSpeciator
from lca_engine.errors import UnitMismatch
from lca_engine.models.enums import (
    CATEGORY_UNITS,
    FailureType,
    ImpactCategory,
    LifecycleStage,
    MaterialCategory,
    TransportMode,
)
from lca_engine.models.factor import FactorRecord
from lca_engine.models.material import MaterialLineItem, duplicate_ids

logger = logging.getLogger(__name__)


class ImpactAggregator:
    """Stateless engine that multiplies quantities by factors and sums them."""

    def __init__(
        self,
        speciator: GHGSpeciator,
        transport_factors: Optional[Mapping[TransportMode, float]] = None,
    ):
        self._speciator = speciator
        self._transport_factors = dict(transport_factors or {})

    def aggregate(
        self,
        pairs: Sequence[tuple[MaterialLineItem, FactorRecord]],
        failed: Iterable[FailedMaterial] = (),
    ) -> ImpactAggregate:
        """Aggregate all pairs; a unit mismatch fails only that material.

        Breakdowns are keyed by material id, so ids must be unique.
        """
        duplicates = duplicate_ids(item for item, _ in pairs)
        if duplicates:
            raise ValueError(f"duplicate material ids: {', '.join(sorted(duplicates))}")

        materials: list[MaterialImpact] = []
        failures: list[FailedMaterial] = list(failed)

        for item, factor in pairs:
            try:
                materials.append(self._calculate_single_material(item, factor))
            except UnitMismatch as e:
                logger.warning(f"Skipping '{item.name}': {e}")
                failures.append(
                    FailedMaterial(
                        material_id=item.id,
                        material_name=item.name,
                        error_type=FailureType.UNIT_MISMATCH,
                        reason=str(e),
                    )
                )

        results = self._impact_results(materials)
        categories = {
            category: self._category_breakdown(category, results)
            for category in ImpactCategory
        }
        ghg = sum_breakdowns([m.ghg for m in materials])

        logger.info(
            "Aggregated %d materials (%d failed): climate total %.6f kg CO2e",
            len(materials),
            len(failures),
            categories[ImpactCategory.CLIMATE].total,
        )

        return ImpactAggregate(
            materials=tuple(materials),
            results=results,
            categories=categories,
            ghg=ghg,
            failed=tuple(failures),
        )

    def _calculate_single_material(
        self, item: MaterialLineItem, factor: FactorRecord
    ) -> MaterialImpact:
        """Calculate a single material's impacts and speciation."""
        if not units.same_unit(item.unit, factor.reference_unit):
            raise UnitMismatch(item.name, item.unit, factor.reference_unit)

        impacts = {
            category: item.quantity * factor.value_for(category)
            for category in ImpactCategory
        }
        category = item.category
        if category == MaterialCategory.OTHER:
            category = factor.category

        material_ghg = self._speciator.speciate(
            impacts[ImpactCategory.CLIMATE],
            category,
            explicit=factor.speciation,
            quantity=item.quantity,
        )
        transport_co2e = self._transport_emissions(item)
        if transport_co2e > 0:
            transport_ghg = self._speciator.speciate(
                transport_co2e, MaterialCategory.TRANSPORT
            )
            ghg = sum_breakdowns([material_ghg, transport_ghg])
        else:
            ghg = material_ghg

        return MaterialImpact(
            material_id=item.id,
            material_name=item.name,
            stage=item.stage,
            material_category=category,
            quantity=item.quantity,
            unit=item.unit,
            impacts=impacts,
            transport_co2e=transport_co2e,
            ghg=ghg,
            factor_id=factor.factor_id,
            tier=factor.tier,
            confidence=factor.confidence,
            source_reference=factor.source_reference,
            methodology=factor.methodology,
        )

    def _transport_emissions(self, item: MaterialLineItem) -> float:
        """kg CO2e for the item's transport leg: tonnes x km x mode factor."""
        if not item.has_transport_leg:
            return 0.0
        if not units.is_mass_unit(item.unit):
            logger.warning(
                f"Transport leg for '{item.name}' skipped: unit '{item.unit}' is not a mass"
            )
            return 0.0
        mode_factor = self._transport_factors.get(item.transport_mode)
        if mode_factor is None:
            logger.warning(
                f"No transport factor for mode '{item.transport_mode.value}'; "
                f"leg for '{item.name}' skipped"
            )
            return 0.0
        tonnes = units.to_kg(item.quantity, item.unit, label=item.name) / 1000.0
        return tonnes * item.transport_distance_km * mode_factor

    @staticmethod
    def _impact_results(materials: list[MaterialImpact]) -> tuple[ImpactResult, ...]:
        results: list[ImpactResult] = []
        for m in materials:
            for category in ImpactCategory:
                results.append(
                    ImpactResult(
                        material_id=m.material_id,
                        material_name=m.material_name,
                        stage=m.stage,
                        category=category,
                        value=m.impacts[category],
                        unit=CATEGORY_UNITS[category],
                    )
                )
            if m.transport_co2e > 0:
                results.append(
                    ImpactResult(
                        material_id=m.material_id,
                        material_name=m.material_name,
                        stage=LifecycleStage.DISTRIBUTION,
                        category=ImpactCategory.CLIMATE,
                        value=m.transport_co2e,
                        unit=CATEGORY_UNITS[ImpactCategory.CLIMATE],
                    )
                )
        return tuple(results)

    @staticmethod
    def _category_breakdown(
        category: ImpactCategory, results: tuple[ImpactResult, ...]
    ) -> CategoryBreakdown:
        by_stage: dict[LifecycleStage, list[float]] = defaultdict(list)
        by_material: dict[str, list[float]] = defaultdict(list)
        values: list[float] = []
        for r in results:
            if r.category != category:
                continue
            values.append(r.value)
            by_stage[r.stage].append(r.value)
            by_material[r.material_id].append(r.value)

        return CategoryBreakdown(
            category=category,
            unit=CATEGORY_UNITS[category],
            total=math.fsum(values),
            by_stage={stage: math.fsum(v) for stage, v in by_stage.items()},
            by_material={mid: math.fsum(v) for mid, v in by_material.items()},
        )
