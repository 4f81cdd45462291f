from __future__ import annotations

from abc import ABC, abstractmethod

from lca_engine.models.factor import FactorCatalog


class CatalogProvider(ABC):
    """Abstract base for all factor catalog providers."""

    @abstractmethod
    async def fetch_catalog(self) -> FactorCatalog:
        """Fetch an immutable catalog snapshot.

        Raises CatalogUnavailable when no snapshot can be produced.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the catalog source is reachable."""
        ...
