"""Completeness, consistency and mass-balance checks over a finished aggregate."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import AbstractSet, Iterable, Mapping, Optional, Sequence

from lca_engine.engine import units
from lca_engine.engine.result import (
    CompletenessSnapshot,
    ImpactAggregate,
    MassBalanceCheck,
)
from lca_engine.errors import UnitMismatch
from lca_engine.models.enums import (
    CATEGORY_LABELS,
    STAGE_LABELS,
    ImpactCategory,
    LifecycleStage,
)
from lca_engine.models.material import MaterialLineItem

logger = logging.getLogger(__name__)

# Stages whose material masses count as product inputs for the mass balance.
MASS_BALANCE_STAGES = frozenset(
    {
        LifecycleStage.RAW_MATERIALS,
        LifecycleStage.PACKAGING,
        LifecycleStage.PROCESSING,
    }
)


class CompletenessChecker:
    """Measures stage coverage, flags data gaps and validates consistency.

    Mass-balance failures are soft: they downgrade ``methodology_consistent``
    and ``mass_balance_valid`` and add an issue, never raise.
    """

    def __init__(
        self,
        expected_stages: Mapping[LifecycleStage, int],
        mass_balance_tolerance_pct: float = 10.0,
        low_confidence_threshold: float = 0.5,
    ):
        self.expected_stages = dict(expected_stages)
        self.tolerance_pct = mass_balance_tolerance_pct
        self.low_confidence_threshold = low_confidence_threshold

    def check(
        self,
        items: Sequence[MaterialLineItem],
        aggregate: ImpactAggregate,
        declared_output_mass: Optional[float] = None,
        output_unit: str = "kg",
        disclosed_tier_mixing: AbstractSet[ImpactCategory] = frozenset(),
        stages: Optional[Iterable[LifecycleStage]] = None,
    ) -> CompletenessSnapshot:
        """Run every check.

        ``stages`` restricts the expected stage set (e.g. to a system
        boundary); by default every configured stage is expected.
        """
        expected = self._expected(stages)
        coverage, missing = self._stage_coverage(items, aggregate, expected)

        issues: list[str] = []
        issues.extend(self._tier_mixing_issues(aggregate, disclosed_tier_mixing))

        methodologies = sorted({m.methodology for m in aggregate.materials if m.methodology})
        methodology_consistent = True
        if len(methodologies) > 1:
            methodology_consistent = False
            issues.append(
                "Multiple characterisation methods used across factors: "
                + ", ".join(methodologies)
            )

        mass_balance = self.mass_balance(items, declared_output_mass, output_unit)
        if mass_balance.assessed and not mass_balance.valid:
            methodology_consistent = False
            issues.append(
                f"Mass balance variance of {mass_balance.variance_pct:.1f}% exceeds "
                f"the {mass_balance.tolerance_pct:.0f}% tolerance "
                f"(input {mass_balance.input_kg:.3f} kg, output {mass_balance.output_kg:.3f} kg)"
            )

        overall = math.fsum(coverage.values()) / len(coverage) if coverage else 0.0

        for issue in issues:
            logger.warning(f"Consistency issue: {issue}")

        return CompletenessSnapshot(
            stage_coverage=coverage,
            missing_data=missing,
            consistency_issues=tuple(issues),
            mass_balance=mass_balance,
            methodology_consistent=methodology_consistent,
            overall_score=overall,
        )

    def _expected(self, stages: Optional[Iterable[LifecycleStage]]) -> dict[LifecycleStage, int]:
        if stages is None:
            return dict(self.expected_stages)
        allowed = set(stages)
        return {s: n for s, n in self.expected_stages.items() if s in allowed}

    def _stage_coverage(
        self,
        items: Sequence[MaterialLineItem],
        aggregate: ImpactAggregate,
        expected: Mapping[LifecycleStage, int],
    ) -> tuple[dict[LifecycleStage, float], dict[LifecycleStage, tuple[str, ...]]]:
        resolved_counts: dict[LifecycleStage, int] = defaultdict(int)
        for m in aggregate.materials:
            resolved_counts[m.stage] += 1
            # A resolved transport leg is a distribution entry in its own right.
            if m.transport_co2e > 0 and m.stage != LifecycleStage.DISTRIBUTION:
                resolved_counts[LifecycleStage.DISTRIBUTION] += 1

        recorded: dict[LifecycleStage, list[MaterialLineItem]] = defaultdict(list)
        for item in items:
            recorded[item.stage].append(item)

        failures = {f.material_id: f for f in aggregate.failed}
        reasons: dict[LifecycleStage, list[str]] = defaultdict(list)

        coverage: dict[LifecycleStage, float] = {}
        for stage, minimum in expected.items():
            label = STAGE_LABELS[stage]
            pct = min(resolved_counts[stage] / max(minimum, 1) * 100.0, 100.0)
            coverage[stage] = pct
            if pct == 0.0:
                if recorded[stage]:
                    reasons[stage].append(
                        f"No resolved factors for the {len(recorded[stage])} "
                        f"material(s) recorded in {label}"
                    )
                else:
                    reasons[stage].append(f"No materials recorded for {label}")
            elif pct < 100.0:
                reasons[stage].append(
                    f"{label} has {resolved_counts[stage]} of {minimum} expected entries"
                )

        for stage, stage_items in recorded.items():
            for item in stage_items:
                failure = failures.get(item.id)
                if failure is not None:
                    reasons[stage].append(f"{item.name}: {failure.error_type.value}")

        for m in aggregate.materials:
            if m.confidence < self.low_confidence_threshold:
                reasons[m.stage].append(
                    f"{m.material_name}: low-confidence {m.tier.value} factor "
                    f"(confidence {m.confidence:.2f})"
                )

        missing = {stage: tuple(r) for stage, r in reasons.items() if r}
        return coverage, missing

    @staticmethod
    def _tier_mixing_issues(
        aggregate: ImpactAggregate, disclosed: AbstractSet[ImpactCategory]
    ) -> list[str]:
        issues: list[str] = []
        for category in ImpactCategory:
            if category in disclosed:
                continue
            tiers = sorted({m.tier.value for m in aggregate.materials if m.value(category) > 0})
            if len(tiers) > 1:
                issues.append(
                    f"Mixed data tiers ({', '.join(tiers)}) used for "
                    f"{CATEGORY_LABELS[category]} without disclosure; review before publication"
                )
        return issues

    def mass_balance(
        self,
        items: Sequence[MaterialLineItem],
        declared_output_mass: Optional[float],
        output_unit: str = "kg",
    ) -> MassBalanceCheck:
        """Compare summed input mass with the declared product output mass.

        variance% = |input - output| / input * 100
        """
        input_masses: list[float] = []
        excluded: list[str] = []
        for item in items:
            if item.stage not in MASS_BALANCE_STAGES:
                continue
            if units.is_mass_unit(item.unit):
                input_masses.append(units.to_kg(item.quantity, item.unit, label=item.name))
            else:
                excluded.append(item.name)
        input_kg = math.fsum(input_masses)

        output_kg = 0.0
        if declared_output_mass is not None:
            try:
                output_kg = units.to_kg(declared_output_mass, output_unit, label="declared output")
            except UnitMismatch as e:
                logger.warning(f"Mass balance not assessed: {e}")
                declared_output_mass = None

        if declared_output_mass is None or input_kg == 0:
            return MassBalanceCheck(
                assessed=False,
                input_kg=input_kg,
                output_kg=output_kg,
                variance_pct=0.0,
                tolerance_pct=self.tolerance_pct,
                valid=True,
                excluded_materials=tuple(excluded),
            )

        variance = abs(input_kg - output_kg) / input_kg * 100.0
        return MassBalanceCheck(
            assessed=True,
            input_kg=input_kg,
            output_kg=output_kg,
            variance_pct=variance,
            tolerance_pct=self.tolerance_pct,
            valid=variance <= self.tolerance_pct,
            excluded_materials=tuple(excluded),
        )
