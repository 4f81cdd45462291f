"""Tests for catalog providers -- all mocked, no network access needed."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from pydantic import ValidationError

from lca_engine.config.settings import Settings
from lca_engine.errors import CatalogUnavailable
from lca_engine.models.enums import MaterialCategory, ProvenanceTier
from lca_engine.providers import CatalogPayload, FileCatalogProvider, HttpCatalogProvider

CATALOG_DOC = {
    "version": "2026.1",
    "supplier_factors": [
        {
            "id": "sup-1",
            "name": "Verallia Flint 330",
            "climate": 0.72,
            "supplier_reference": "SUP-GLASS-01",
            "methodology": "EF 3.1",
        }
    ],
    "proxy_factors": [
        {
            "id": "px-sugar",
            "name": "Cane sugar",
            "climate": 0.9,
            "water": 0.15,
            "category": "agricultural",
            "aliases": ["sugar"],
            "speciation": {"fossil_co2e": 0.3, "biogenic_co2e": 0.6},
        }
    ],
    "category_defaults": [
        {"id": "def-pack", "name": "Generic packaging", "climate": 1.5, "category": "packaging"}
    ],
}


def _mock_response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


class TestCatalogPayload:
    def test_to_catalog(self):
        catalog = CatalogPayload.model_validate(CATALOG_DOC).to_catalog()
        assert catalog.version == "2026.1"
        assert catalog.size() == 3
        supplier = catalog.supplier_factors["SUP-GLASS-01"]
        assert supplier.tier == ProvenanceTier.PRIMARY
        assert supplier.methodology == "EF 3.1"
        proxy = catalog.proxy_factors[0]
        assert proxy.aliases == ("sugar",)
        assert proxy.speciation.biogenic_co2e == 0.6
        assert catalog.category_defaults[MaterialCategory.PACKAGING].tier == ProvenanceTier.TERTIARY

    def test_supplier_without_reference_rejected(self):
        doc = {"supplier_factors": [{"id": "s", "name": "x", "climate": 1.0}]}
        with pytest.raises(ValidationError):
            CatalogPayload.model_validate(doc)

    def test_negative_factor_rejected(self):
        doc = {"proxy_factors": [{"id": "p", "name": "x", "climate": -1.0}]}
        with pytest.raises(ValidationError):
            CatalogPayload.model_validate(doc)

    def test_duplicate_category_default_rejected(self):
        entry = {"id": "d", "name": "x", "climate": 1.0, "category": "packaging"}
        with pytest.raises(ValidationError):
            CatalogPayload.model_validate({"category_defaults": [entry, dict(entry, id="d2")]})


class TestFileCatalogProvider:
    @pytest.mark.asyncio
    async def test_loads_catalog(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(CATALOG_DOC))
        provider = FileCatalogProvider(path)
        assert await provider.health_check() is True
        catalog = await provider.fetch_catalog()
        assert catalog.version == "2026.1"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        provider = FileCatalogProvider(tmp_path / "missing.json")
        assert await provider.health_check() is False
        with pytest.raises(CatalogUnavailable):
            await provider.fetch_catalog()

    @pytest.mark.asyncio
    async def test_invalid_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json")
        with pytest.raises(CatalogUnavailable):
            await FileCatalogProvider(path).fetch_catalog()


class TestHttpCatalogProvider:
    @pytest.fixture
    def settings(self):
        return Settings(catalog_url="https://factors.example.com/", catalog_api_key="secret")

    @pytest.mark.asyncio
    async def test_fetches_catalog(self, settings):
        provider = HttpCatalogProvider(settings=settings)
        provider._client = AsyncMock()
        provider._client.get = AsyncMock(return_value=_mock_response(200, CATALOG_DOC))

        catalog = await provider.fetch_catalog()

        assert catalog.version == "2026.1"
        args, kwargs = provider._client.get.call_args
        assert args[0] == "https://factors.example.com/factors/catalog"
        assert kwargs["headers"]["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_non_200_raises(self, settings):
        provider = HttpCatalogProvider(settings=settings)
        provider._client = AsyncMock()
        provider._client.get = AsyncMock(return_value=_mock_response(503))
        with pytest.raises(CatalogUnavailable, match="503"):
            await provider.fetch_catalog()

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, settings):
        provider = HttpCatalogProvider(settings=settings)
        provider._client = AsyncMock()
        provider._client.get = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(CatalogUnavailable):
            await provider.fetch_catalog()

    @pytest.mark.asyncio
    async def test_invalid_payload_raises(self, settings):
        provider = HttpCatalogProvider(settings=settings)
        provider._client = AsyncMock()
        provider._client.get = AsyncMock(
            return_value=_mock_response(200, {"proxy_factors": [{"id": "p"}]})
        )
        with pytest.raises(CatalogUnavailable):
            await provider.fetch_catalog()

    @pytest.mark.asyncio
    async def test_no_url_configured(self):
        provider = HttpCatalogProvider(settings=Settings(catalog_url=""))
        with pytest.raises(CatalogUnavailable):
            await provider.fetch_catalog()
        assert await provider.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check(self, settings):
        with patch("lca_engine.providers.http_provider.httpx.AsyncClient") as MockClient:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(return_value=_mock_response(200))
            MockClient.return_value = mock_client

            provider = HttpCatalogProvider(settings=settings)
            assert await provider.health_check() is True

            mock_client.get = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
            assert await provider.health_check() is False


class TestSettings:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("LCA_CATALOG_URL", "https://factors.example.com")
        monkeypatch.setenv("LCA_CATALOG_TIMEOUT_SECONDS", "5")
        settings = Settings()
        assert settings.catalog_url == "https://factors.example.com"
        assert settings.catalog_timeout_seconds == 5.0
