"""QC: failure isolation -- bad inputs degrade the result, never poison it."""

from unittest.mock import AsyncMock

import pytest

from lca_engine.errors import CatalogUnavailable, DataNotFound
from lca_engine.models.enums import (
    FailureType,
    ImpactCategory,
    LifecycleStage,
    MaterialCategory,
)
from lca_engine.models.factor import FactorCatalog
from lca_engine.models.material import CalculationRun
from lca_engine.orchestrator import InterpretationReportBuilder, InterpretationService
from lca_engine.resolver import FactorResolver
from tests.conftest import FIXED_TIME, make_factor, make_item


@pytest.fixture
def builder(methodology):
    return InterpretationReportBuilder(methodology)


class TestPerMaterialIsolation:
    def test_one_unresolvable_material_does_not_poison_run(
        self, builder, beverage_items, beverage_catalog
    ):
        run = CalculationRun(
            run_id="r",
            product_name="Lemonade",
            materials=tuple(beverage_items) + (make_item("Xq-7 proprietary blend", 0.01),),
        )
        result = builder.build(run, beverage_catalog, generated_at=FIXED_TIME)
        assert [f.material_name for f in result.failed_materials] == ["Xq-7 proprietary blend"]
        assert round(result.totals[ImpactCategory.CLIMATE], 4) == 0.2452
        assert any("Xq-7 proprietary blend" in w for w in result.warnings)

    def test_unresolved_material_never_substituted_with_zero(self, beverage_catalog):
        resolver = FactorResolver.from_catalog(beverage_catalog)
        with pytest.raises(DataNotFound):
            resolver.resolve(make_item("Xq-7 proprietary blend", 0.01))

    def test_failed_material_absent_from_results(self, builder, beverage_items, beverage_catalog):
        run = CalculationRun(
            run_id="r",
            product_name="Lemonade",
            materials=tuple(beverage_items) + (make_item("Xq-7 proprietary blend", 0.01),),
        )
        result = builder.build(run, beverage_catalog, generated_at=FIXED_TIME)
        names = {r.material_name for r in result.impact_results}
        assert "Xq-7 proprietary blend" not in names
        for contribution in result.contributions.values():
            assert all(r.material != "Xq-7 proprietary blend" for r in contribution.records)

    def test_unit_mismatch_recorded_with_type(self, builder, beverage_items, beverage_catalog):
        items = list(beverage_items)
        items[0] = make_item("Water", 300, unit="ml")
        run = CalculationRun(run_id="r", product_name="Lemonade", materials=tuple(items))
        result = builder.build(run, beverage_catalog, generated_at=FIXED_TIME)
        failed = {f.material_name: f.error_type for f in result.failed_materials}
        assert failed == {"Water": FailureType.UNIT_MISMATCH}


class TestDegenerateInputs:
    def test_zero_quantities_give_degenerate_sensitivity(self, builder, beverage_catalog):
        run = CalculationRun(
            run_id="r",
            product_name="Empty bottle",
            materials=(
                make_item("Sugar", 0.0),
                make_item("Glass Bottle", 0.0, stage=LifecycleStage.PACKAGING),
            ),
        )
        result = builder.build(run, beverage_catalog, generated_at=FIXED_TIME)
        assert result.totals[ImpactCategory.CLIMATE] == 0.0
        climate = [s for s in result.sensitivity if s.category == ImpactCategory.CLIMATE]
        assert climate
        assert all(s.is_degenerate and not s.is_highly_sensitive for s in climate)
        contribution = result.contributions[ImpactCategory.CLIMATE]
        assert all(r.percentage == 0.0 and not r.is_dominant for r in contribution.records)

    def test_empty_bill_of_materials(self, builder, beverage_catalog):
        run = CalculationRun(run_id="r", product_name="Nothing", materials=())
        result = builder.build(run, beverage_catalog, generated_at=FIXED_TIME)
        assert result.impact_results == ()
        assert result.completeness_score == 0.0
        assert "considered high" in result.uncertainty_statement


class TestCatalogFailures:
    def test_missing_catalog_is_hard_failure(self, builder, beverage_run):
        with pytest.raises(CatalogUnavailable):
            builder.build(beverage_run, None)

    def test_empty_catalog_is_hard_failure(self, builder, beverage_run):
        with pytest.raises(CatalogUnavailable):
            builder.build(beverage_run, FactorCatalog(version="empty"))

    def test_defaults_only_catalog_still_runs(self, builder, beverage_run):
        catalog = FactorCatalog(
            category_defaults={
                MaterialCategory.AGRICULTURAL: make_factor("Generic crop", 0.8),
                MaterialCategory.PACKAGING: make_factor("Generic packaging", 1.5),
            }
        )
        result = builder.build(beverage_run, catalog, generated_at=FIXED_TIME)
        assert len(result.impact_results) > 0
        assert len(result.failed_materials) > 0

    @pytest.mark.asyncio
    async def test_provider_failure_surfaces_from_service(self, methodology, beverage_run):
        provider = AsyncMock()
        provider.fetch_catalog = AsyncMock(side_effect=CatalogUnavailable("timeout"))
        service = InterpretationService(provider=provider, config=methodology)
        with pytest.raises(CatalogUnavailable):
            await service.interpret(beverage_run)
