"""JSON file provider -- loads a catalog snapshot from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from lca_engine.errors import CatalogUnavailable
from lca_engine.models.factor import FactorCatalog

from .base import CatalogProvider
from .schema import CatalogPayload

logger = logging.getLogger(__name__)


class FileCatalogProvider(CatalogProvider):
    """Reads a catalog document validated by CatalogPayload."""

    def __init__(self, path: Path):
        self._path = Path(path)

    async def health_check(self) -> bool:
        return self._path.is_file()

    async def fetch_catalog(self) -> FactorCatalog:
        try:
            with open(self._path, "r") as f:
                raw = json.load(f)
            payload = CatalogPayload.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to load factor catalog from {self._path}: {e}")
            raise CatalogUnavailable(f"Cannot read factor catalog {self._path}: {e}") from e

        catalog = payload.to_catalog()
        logger.info(f"Loaded catalog {catalog.version} ({catalog.size()} factors) from {self._path}")
        return catalog
