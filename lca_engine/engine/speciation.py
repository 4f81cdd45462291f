"""GHG speciation of aggregated climate values.

Heuristic splits are proxy decompositions of an already aggregated number,
not independent measurements. Results built on them (and on blended
provenance tiers) can overstate apparent precision.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from lca_engine.engine.result import (
    GWP_CH4_BIOGENIC,
    GWP_CH4_FOSSIL,
    GWP_N2O,
    GHGBreakdown,
)
from lca_engine.methodology.schema import SpeciationProfile
from lca_engine.models.enums import MaterialCategory
from lca_engine.models.factor import GHGSpeciationFactors

logger = logging.getLogger(__name__)


class GHGSpeciator:
    """Splits a climate total into fossil/biogenic/dLUC CO2e and CH4/N2O masses."""

    def __init__(
        self,
        profiles: Mapping[str, SpeciationProfile],
        tolerance_pct: float = 1.0,
    ):
        if "default" not in profiles:
            raise ValueError("speciation profiles must include a 'default' profile")
        self._profiles = dict(profiles)
        self._tolerance = tolerance_pct / 100.0

    def profile_for(self, category: MaterialCategory) -> tuple[str, SpeciationProfile]:
        if category.value in self._profiles:
            return category.value, self._profiles[category.value]
        return "default", self._profiles["default"]

    def speciate(
        self,
        total_co2e: float,
        category: MaterialCategory,
        explicit: Optional[GHGSpeciationFactors] = None,
        quantity: float = 1.0,
    ) -> GHGBreakdown:
        """Speciate ``total_co2e``.

        ``explicit`` sub-factors are per reference unit and are scaled by
        ``quantity``; without them the category profile is applied.
        """
        if total_co2e < 0:
            raise ValueError("total_co2e cannot be negative")
        if explicit is not None:
            return self._from_explicit(total_co2e, explicit, quantity)
        return self._from_profile(total_co2e, category)

    def _from_profile(self, total: float, category: MaterialCategory) -> GHGBreakdown:
        name, profile = self.profile_for(category)
        return GHGBreakdown(
            total_co2e=total,
            fossil_co2e=total * profile.fossil_share,
            biogenic_co2e=total * profile.biogenic_share,
            dluc_co2e=total * profile.dluc_share,
            ch4_fossil_kg=total * profile.ch4_fossil_share / GWP_CH4_FOSSIL,
            ch4_biogenic_kg=total * profile.ch4_biogenic_share / GWP_CH4_BIOGENIC,
            n2o_kg=total * profile.n2o_share / GWP_N2O,
            method=f"heuristic:{name}",
        )

    def _from_explicit(
        self, total: float, factors: GHGSpeciationFactors, quantity: float
    ) -> GHGBreakdown:
        breakdown = GHGBreakdown(
            total_co2e=total,
            fossil_co2e=factors.fossil_co2e * quantity,
            biogenic_co2e=factors.biogenic_co2e * quantity,
            dluc_co2e=factors.dluc_co2e * quantity,
            ch4_fossil_kg=factors.ch4_fossil_kg * quantity,
            ch4_biogenic_kg=factors.ch4_biogenic_kg * quantity,
            n2o_kg=factors.n2o_kg * quantity,
            method="explicit",
        )
        residual = breakdown.residual_co2e
        if abs(residual) <= total * self._tolerance:
            return breakdown

        logger.warning(
            "Explicit speciation differs from total by %.6f kg CO2e; reconciling",
            residual,
        )
        if residual > 0:
            # Unallocated CO2e is booked as fossil CO2.
            return GHGBreakdown(
                total_co2e=total,
                fossil_co2e=breakdown.fossil_co2e + residual,
                biogenic_co2e=breakdown.biogenic_co2e,
                dluc_co2e=breakdown.dluc_co2e,
                ch4_fossil_kg=breakdown.ch4_fossil_kg,
                ch4_biogenic_kg=breakdown.ch4_biogenic_kg,
                n2o_kg=breakdown.n2o_kg,
                method="explicit",
                adjustment_co2e=residual,
            )

        scale = total / breakdown.reconciled_co2e
        return GHGBreakdown(
            total_co2e=total,
            fossil_co2e=breakdown.fossil_co2e * scale,
            biogenic_co2e=breakdown.biogenic_co2e * scale,
            dluc_co2e=breakdown.dluc_co2e * scale,
            ch4_fossil_kg=breakdown.ch4_fossil_kg * scale,
            ch4_biogenic_kg=breakdown.ch4_biogenic_kg * scale,
            n2o_kg=breakdown.n2o_kg * scale,
            method="explicit",
            adjustment_co2e=residual,
        )
