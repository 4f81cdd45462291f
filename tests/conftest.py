"""Shared test fixtures for the LCA interpretation engine test suite."""

from datetime import datetime, timezone

import pytest

from lca_engine.engine import GHGSpeciator, ImpactAggregator
from lca_engine.methodology.loader import get_default_methodology
from lca_engine.models.enums import LifecycleStage, MaterialCategory, ProvenanceTier
from lca_engine.models.factor import FactorCatalog, FactorRecord
from lca_engine.models.material import CalculationRun, MaterialLineItem

FIXED_TIME = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


def make_item(
    name,
    quantity,
    unit="kg",
    stage=LifecycleStage.RAW_MATERIALS,
    item_id=None,
    **kwargs,
):
    """Helper to create a MaterialLineItem with minimal boilerplate."""
    return MaterialLineItem(
        id=item_id or name.lower().replace(" ", "-"),
        name=name,
        quantity=quantity,
        unit=unit,
        stage=stage,
        **kwargs,
    )


def make_factor(
    name,
    climate,
    unit="kg",
    tier=ProvenanceTier.SECONDARY,
    confidence=1.0,
    factor_id=None,
    **kwargs,
):
    """Helper to create a FactorRecord with minimal boilerplate."""
    return FactorRecord(
        factor_id=factor_id or f"f-{name.lower().replace(' ', '-')}",
        name=name,
        reference_unit=unit,
        climate=climate,
        tier=tier,
        confidence=confidence,
        **kwargs,
    )


@pytest.fixture
def methodology():
    return get_default_methodology()


@pytest.fixture
def speciator(methodology):
    return GHGSpeciator(
        methodology.speciation.profiles,
        tolerance_pct=methodology.speciation.tolerance_pct,
    )


@pytest.fixture
def aggregator(speciator, methodology):
    return ImpactAggregator(speciator, methodology.transport_factors)


@pytest.fixture
def beverage_items():
    """Six-material 330 ml soft drink -- the reference worked example.

    Expected climate total: 0.24522 kg CO2e (0.2452 at four decimals).
    """
    return [
        make_item("Water", 0.3),
        make_item("Sugar", 0.025),
        make_item("Citric Acid", 0.0005),
        make_item("Natural Flavouring", 0.0002),
        make_item("Glass Bottle", 0.2, stage=LifecycleStage.PACKAGING),
        make_item("Paper Label", 0.002, stage=LifecycleStage.PACKAGING),
    ]


@pytest.fixture
def beverage_factors():
    return {
        "Water": make_factor("Water", 0.0003, water=0.001),
        "Sugar": make_factor(
            "Sugar", 0.90, water=0.15, land=1.2, category=MaterialCategory.AGRICULTURAL
        ),
        "Citric Acid": make_factor("Citric Acid", 1.20, water=0.05),
        "Natural Flavouring": make_factor("Natural Flavouring", 0.65),
        "Glass Bottle": make_factor(
            "Glass Bottle", 1.10, water=0.004, waste=0.02, category=MaterialCategory.PACKAGING
        ),
        "Paper Label": make_factor(
            "Paper Label", 0.95, water=0.03, land=0.8, category=MaterialCategory.PACKAGING
        ),
    }


@pytest.fixture
def beverage_pairs(beverage_items, beverage_factors):
    return [(item, beverage_factors[item.name]) for item in beverage_items]


@pytest.fixture
def beverage_catalog(beverage_factors):
    return FactorCatalog(
        version="2026.1",
        proxy_factors=tuple(beverage_factors.values()),
        category_defaults={
            MaterialCategory.AGRICULTURAL: make_factor(
                "Generic crop", 0.8, factor_id="default-agri"
            ),
            MaterialCategory.PACKAGING: make_factor(
                "Generic packaging", 1.5, factor_id="default-pack"
            ),
        },
    )


@pytest.fixture
def beverage_run(beverage_items):
    return CalculationRun(
        run_id="run-001",
        product_name="Sparkling Lemonade 330ml",
        materials=tuple(beverage_items),
        functional_unit="330 ml bottle",
    )
