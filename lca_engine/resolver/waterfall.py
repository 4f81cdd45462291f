"""Waterfall factor resolution: supplier -> proxy catalog -> category default."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from lca_engine.engine.result import FailedMaterial
from lca_engine.errors import DataNotFound
from lca_engine.methodology.schema import ResolverSettings
from lca_engine.models.enums import FailureType, MaterialCategory, ProvenanceTier
from lca_engine.models.factor import FactorCatalog, FactorRecord
from lca_engine.models.material import MaterialLineItem

from .classifier import detect_material_category
from .sources import (
    CategoryDefaultSource,
    FactorSource,
    ProxyCatalogSource,
    SupplierFactorSource,
)

logger = logging.getLogger(__name__)


# Tier ordering: higher rank = tried first.
_TIER_RANK = {
    ProvenanceTier.TERTIARY: 0,
    ProvenanceTier.SECONDARY: 1,
    ProvenanceTier.PRIMARY: 2,
}


class FactorResolver:
    """Resolves a material to a factor record; first tier with a match wins.

    Tiers are never blended: the returned record comes from exactly one
    source and carries that source's tier and confidence. Resolution is a
    pure function of the catalog snapshot the sources were built from.
    """

    def __init__(self, sources: Sequence[FactorSource]):
        self._sources = sorted(sources, key=lambda s: _TIER_RANK[s.tier], reverse=True)

    @classmethod
    def from_catalog(
        cls, catalog: FactorCatalog, settings: Optional[ResolverSettings] = None
    ) -> FactorResolver:
        settings = settings or ResolverSettings()
        return cls(
            [
                SupplierFactorSource(catalog.supplier_factors),
                ProxyCatalogSource(catalog.proxy_factors, settings.min_match_score),
                CategoryDefaultSource(catalog.category_defaults, settings.default_confidence),
            ]
        )

    @staticmethod
    def classify(item: MaterialLineItem) -> MaterialCategory:
        """Explicit category if set, otherwise inferred from the name."""
        if item.category != MaterialCategory.OTHER:
            return item.category
        return detect_material_category(item.name)

    def resolve(self, item: MaterialLineItem) -> FactorRecord:
        """Resolve one material. Raises DataNotFound when no tier matches."""
        category = self.classify(item)
        for source in self._sources:
            record = source.lookup(item, category)
            if record is not None:
                logger.info(
                    f"Resolved '{item.name}' via {source.tier.value} tier "
                    f"(factor {record.factor_id}, confidence {record.confidence:.2f})"
                )
                return record
        raise DataNotFound(item.name, category.value)

    def resolve_all(
        self, items: Iterable[MaterialLineItem]
    ) -> tuple[list[tuple[MaterialLineItem, FactorRecord]], list[FailedMaterial]]:
        """Resolve every item, collecting unresolvable ones as failures.

        Resolved items are returned with their (possibly inferred) category
        set, so downstream speciation uses the same category.
        """
        resolved: list[tuple[MaterialLineItem, FactorRecord]] = []
        failed: list[FailedMaterial] = []
        for item in items:
            try:
                record = self.resolve(item)
            except DataNotFound as e:
                logger.warning(str(e))
                failed.append(
                    FailedMaterial(
                        material_id=item.id,
                        material_name=item.name,
                        error_type=FailureType.DATA_NOT_FOUND,
                        reason=str(e),
                    )
                )
                continue
            category = self.classify(item)
            if category != item.category:
                item = replace(item, category=category)
            resolved.append((item, record))
        return resolved, failed
