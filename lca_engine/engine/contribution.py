"""Contribution analysis: rank and classify contributors per impact category."""

from __future__ import annotations

import logging
from typing import Sequence

from lca_engine.engine.result import (
    CategoryBreakdown,
    CategoryContribution,
    ContributionRecord,
    MaterialImpact,
)
from lca_engine.models.enums import CATEGORY_LABELS

logger = logging.getLogger(__name__)

# Cumulative share used for the concentration statement.
CONCENTRATION_PCT = 80.0


class ContributionAnalyzer:
    """Ranks materials by absolute contribution to a category total.

    Classification:
    - percentage > dominant_pct    -> dominant
    - percentage > significant_pct -> significant (and not dominant)
    - otherwise minor
    """

    def __init__(self, dominant_pct: float = 40.0, significant_pct: float = 10.0):
        if significant_pct >= dominant_pct:
            raise ValueError("significant_pct must be below dominant_pct")
        self.dominant_pct = dominant_pct
        self.significant_pct = significant_pct

    def analyze(
        self,
        breakdown: CategoryBreakdown,
        materials: Sequence[MaterialImpact],
    ) -> CategoryContribution:
        total = breakdown.total
        by_id = {m.material_id: m for m in materials}

        # Equal values fall back to ascending material name.
        ranked = sorted(
            breakdown.by_material.items(),
            key=lambda kv: (-abs(kv[1]), by_id[kv[0]].material_name),
        )

        records: list[ContributionRecord] = []
        for material_id, value in ranked:
            material = by_id[material_id]
            name = material.material_name
            stage = material.stage

            if total == 0:
                pct = 0.0
                dominant = significant = False
            else:
                pct = value / total * 100.0
                dominant = pct > self.dominant_pct
                significant = not dominant and pct > self.significant_pct

            records.append(
                ContributionRecord(
                    material=name,
                    material_id=material_id,
                    stage=stage,
                    absolute_value=value,
                    percentage=pct,
                    is_significant=significant,
                    is_dominant=dominant,
                )
            )

        return CategoryContribution(
            category=breakdown.category,
            unit=breakdown.unit,
            total=total,
            records=tuple(records),
            significant_issues=self._significant_issues(breakdown, records),
        )

    def _significant_issues(
        self, breakdown: CategoryBreakdown, records: list[ContributionRecord]
    ) -> tuple[str, ...]:
        if breakdown.total == 0:
            return ()
        label = CATEGORY_LABELS[breakdown.category]
        issues = [
            f"{r.material} dominates {label} impact at {r.percentage:.1f}%"
            for r in records
            if r.is_dominant
        ]

        cumulative = 0.0
        for n, r in enumerate(records, start=1):
            cumulative += r.percentage
            if cumulative >= CONCENTRATION_PCT:
                break
        m = len(records)
        if m > 2 and n < m and n <= m / 2:
            issues.append(
                f"{label} impact is concentrated in {n} of {m} materials "
                f"({cumulative:.1f}% of total)"
            )

        for issue in issues:
            logger.info(issue)
        return tuple(issues)
