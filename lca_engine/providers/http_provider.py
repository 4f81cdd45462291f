"""HTTP provider -- fetches a catalog snapshot from the reference-data service."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from lca_engine.config.settings import Settings
from lca_engine.errors import CatalogUnavailable
from lca_engine.models.factor import FactorCatalog

from .base import CatalogProvider
from .schema import CatalogPayload

logger = logging.getLogger(__name__)


class HttpCatalogProvider(CatalogProvider):
    """Fetches the factor catalog as one JSON document over HTTP."""

    CATALOG_PATH = "/factors/catalog"
    HEALTH_PATH = "/health"

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings()
        self._base_url = self._settings.catalog_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=self._settings.catalog_timeout_seconds)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._settings.catalog_api_key:
            headers["Authorization"] = f"Bearer {self._settings.catalog_api_key}"
        return headers

    async def health_check(self) -> bool:
        if not self._base_url:
            return False
        try:
            resp = await self._client.get(self._base_url + self.HEALTH_PATH, headers=self._headers())
            return resp.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Catalog health check failed: {e}")
            return False

    async def fetch_catalog(self) -> FactorCatalog:
        if not self._base_url:
            raise CatalogUnavailable("No catalog URL configured (set LCA_CATALOG_URL)")

        url = self._base_url + self.CATALOG_PATH
        try:
            resp = await self._client.get(url, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Catalog request to {url} failed: {e}")
            raise CatalogUnavailable(f"Catalog request failed: {e}") from e

        if resp.status_code != 200:
            logger.error(f"Catalog service returned HTTP {resp.status_code}")
            raise CatalogUnavailable(f"Catalog service returned HTTP {resp.status_code}")

        try:
            payload = CatalogPayload.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Invalid catalog payload from {url}: {e}")
            raise CatalogUnavailable(f"Invalid catalog payload: {e}") from e

        catalog = payload.to_catalog()
        logger.info(f"Fetched catalog {catalog.version} ({catalog.size()} factors)")
        return catalog

    async def aclose(self) -> None:
        await self._client.aclose()
