"""Interpretation service -- acquires a catalog snapshot, then runs the builder."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from lca_engine.config.settings import Settings
from lca_engine.engine.result import InterpretationResult
from lca_engine.methodology.loader import load_methodology
from lca_engine.methodology.schema import MethodologyConfig
from lca_engine.models.material import CalculationRun
from lca_engine.providers.base import CatalogProvider
from lca_engine.providers.http_provider import HttpCatalogProvider

from .report_builder import InterpretationReportBuilder

logger = logging.getLogger(__name__)


class InterpretationService:
    """Coordinates catalog acquisition and interpretation.

    The only suspension point is the catalog fetch; the pipeline itself is
    synchronous over the fetched snapshot. A catalog update is seen only by
    runs that fetch after it.
    """

    def __init__(
        self,
        provider: Optional[CatalogProvider] = None,
        config: Optional[MethodologyConfig] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or Settings()
        if config is None:
            path = self._settings.methodology_path
            config = load_methodology(Path(path) if path else None)
        self._owns_provider = provider is None
        self._provider = provider or HttpCatalogProvider(settings=self._settings)
        self._builder = InterpretationReportBuilder(config)

    async def interpret(
        self,
        run: CalculationRun,
        *,
        generated_at: Optional[datetime] = None,
        version: int = 1,
        convert_units: bool = False,
    ) -> InterpretationResult:
        """Fetch a catalog snapshot and interpret ``run`` against it.

        CatalogUnavailable from the provider propagates unchanged.
        """
        catalog = await self._provider.fetch_catalog()
        result = self._builder.build(
            run,
            catalog,
            generated_at=generated_at,
            version=version,
            convert_units=convert_units,
        )
        logger.info(
            f"Run '{run.run_id}' v{version}: completeness {result.completeness_score:.0f}%, "
            f"{len(result.failed_materials)} failed material(s)"
        )
        return result

    async def aclose(self) -> None:
        """Close the default HTTP provider; injected providers belong to the caller."""
        if self._owns_provider:
            await self._provider.aclose()
