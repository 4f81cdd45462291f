"""One-at-a-time sensitivity analysis over the top contributors of a category."""

from __future__ import annotations

import logging
import math

from lca_engine.engine.result import (
    CategoryContribution,
    ContributionRecord,
    SensitivityRecord,
)
from lca_engine.models.enums import ImpactCategory

logger = logging.getLogger(__name__)

# Fixed perturbation of a material quantity (±10%).
PERTURBATION = 0.10


class SensitivityAnalyzer:
    """Perturbs each top-N contributor by ±10% and measures the elasticity of
    the category total.

    ratio = (result_max - result_min) / baseline / (2 * PERTURBATION)

    For the linear aggregation model the ratio equals the contributor's share
    of the total, so it lies in [0, 1].
    """

    def __init__(self, highly_sensitive_threshold: float = 0.5, top_n: int = 3):
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        self.threshold = highly_sensitive_threshold
        self.top_n = top_n

    def analyze(self, contribution: CategoryContribution) -> tuple[SensitivityRecord, ...]:
        """Sensitivity records for the top contributors, in rank order."""
        baseline = contribution.total
        selected = contribution.records[: self.top_n]

        if baseline == 0:
            if selected:
                logger.info(
                    f"Zero baseline for {contribution.category.value}; "
                    "sensitivity reported as degenerate"
                )
            return tuple(
                self._degenerate(r, contribution.category) for r in selected
            )

        values = [r.absolute_value for r in contribution.records]
        records: list[SensitivityRecord] = []
        for index, record in enumerate(selected):
            if record.absolute_value == 0:
                continue
            low = self._recompute(values, index, 1.0 - PERTURBATION)
            high = self._recompute(values, index, 1.0 + PERTURBATION)
            result_min, result_max = min(low, high), max(low, high)
            ratio = abs(result_max - result_min) / baseline / (2 * PERTURBATION)
            records.append(
                SensitivityRecord(
                    parameter=f"{record.material} quantity",
                    material_id=record.material_id,
                    material_name=record.material,
                    category=contribution.category,
                    baseline_result=baseline,
                    result_min=result_min,
                    result_max=result_max,
                    sensitivity_ratio=ratio,
                    is_highly_sensitive=ratio > self.threshold,
                )
            )
        return tuple(records)

    @staticmethod
    def _recompute(values: list[float], index: int, scale: float) -> float:
        """Category total with the material at ``index`` scaled by ``scale``."""
        return math.fsum(
            v * scale if i == index else v for i, v in enumerate(values)
        )

    @staticmethod
    def _degenerate(
        record: ContributionRecord, category: ImpactCategory
    ) -> SensitivityRecord:
        return SensitivityRecord(
            parameter=f"{record.material} quantity",
            material_id=record.material_id,
            material_name=record.material,
            category=category,
            baseline_result=0.0,
            result_min=0.0,
            result_max=0.0,
            sensitivity_ratio=0.0,
            is_highly_sensitive=False,
            is_degenerate=True,
        )
