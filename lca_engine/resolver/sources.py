"""The three factor sources tried by the resolution waterfall."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Mapping, Optional, Sequence

from lca_engine.models.enums import MaterialCategory, ProvenanceTier
from lca_engine.models.factor import FactorRecord
from lca_engine.models.material import MaterialLineItem

from .matching import match_score, normalize_name

logger = logging.getLogger(__name__)


class FactorSource(ABC):
    """One tier of the waterfall. Returns a stamped record or None."""

    tier: ProvenanceTier

    @abstractmethod
    def lookup(
        self, item: MaterialLineItem, category: MaterialCategory
    ) -> Optional[FactorRecord]:
        """Return a factor for ``item`` or None when this tier has no match."""
        ...


class SupplierFactorSource(FactorSource):
    """Exact supplier-specific factors keyed by supplier product reference."""

    tier = ProvenanceTier.PRIMARY

    def __init__(self, factors: Mapping[str, FactorRecord]):
        self._factors = dict(factors)

    def lookup(
        self, item: MaterialLineItem, category: MaterialCategory
    ) -> Optional[FactorRecord]:
        if not item.source_reference:
            return None
        record = self._factors.get(item.source_reference)
        if record is None:
            return None
        return record.as_match(self.tier, 1.0)


class ProxyCatalogSource(FactorSource):
    """Curated proxy records matched by name.

    Confidence is the match-quality score of the best candidate. Aliases are
    scored like names. Equal scores are broken by factor id so the choice
    never depends on catalog order.
    """

    tier = ProvenanceTier.SECONDARY

    def __init__(self, factors: Sequence[FactorRecord], min_match_score: float = 0.5):
        self._factors = tuple(factors)
        self._min_score = min_match_score

    def lookup(
        self, item: MaterialLineItem, category: MaterialCategory
    ) -> Optional[FactorRecord]:
        best: Optional[tuple[float, FactorRecord]] = None
        for record in self._factors:
            score = max(match_score(item.name, n) for n in (record.name, *record.aliases))
            if score < self._min_score:
                continue
            if (
                best is None
                or score > best[0]
                or (score == best[0] and record.factor_id < best[1].factor_id)
            ):
                best = (score, record)

        if best is None:
            return None
        score, record = best
        logger.debug(
            f"Proxy match for '{normalize_name(item.name)}': "
            f"'{record.name}' (score {score:.2f})"
        )
        return record.as_match(self.tier, score)


class CategoryDefaultSource(FactorSource):
    """One fallback record per material category, at a fixed low confidence."""

    tier = ProvenanceTier.TERTIARY

    def __init__(
        self,
        defaults: Mapping[MaterialCategory, FactorRecord],
        baseline_confidence: float = 0.3,
    ):
        self._defaults = dict(defaults)
        self._confidence = baseline_confidence

    def lookup(
        self, item: MaterialLineItem, category: MaterialCategory
    ) -> Optional[FactorRecord]:
        record = self._defaults.get(category)
        if record is None:
            return None
        return record.as_match(self.tier, self._confidence)
