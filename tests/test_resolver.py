"""Tests for waterfall factor resolution."""

import pytest

from lca_engine.errors import DataNotFound
from lca_engine.methodology.schema import ResolverSettings
from lca_engine.models.enums import FailureType, MaterialCategory, ProvenanceTier
from lca_engine.models.factor import FactorCatalog
from lca_engine.resolver import (
    FactorResolver,
    ProxyCatalogSource,
    detect_material_category,
    match_score,
    normalize_name,
)
from tests.conftest import make_factor, make_item


@pytest.fixture
def catalog():
    return FactorCatalog(
        version="test",
        supplier_factors={"SUP-GLASS-01": make_factor("Verallia Flint 330", 0.72)},
        proxy_factors=(
            make_factor("Glass Bottle", 1.10),
            make_factor("Sugar (beet)", 0.55, aliases=("beet sugar",)),
            make_factor("Cane sugar", 0.90),
        ),
        category_defaults={
            MaterialCategory.AGRICULTURAL: make_factor("Generic crop", 0.8, factor_id="def-agri"),
            MaterialCategory.PACKAGING: make_factor("Generic packaging", 1.5, factor_id="def-pack"),
        },
    )


@pytest.fixture
def resolver(catalog):
    return FactorResolver.from_catalog(catalog, ResolverSettings())


class TestMatching:
    def test_normalize_name(self):
        assert normalize_name("  Glass-Bottle (Green) ") == "glass bottle green"

    def test_identical_names_score_one(self):
        assert match_score("Glass Bottle", "glass  bottle") == 1.0

    def test_containment_scores_by_length_ratio(self):
        score = match_score("Glass Bottle (green)", "Glass Bottle")
        assert 0.70 < score < 0.95

    def test_token_overlap(self):
        score = match_score("recycled glass", "glass cullet")
        assert score == pytest.approx(0.85 / 3)

    def test_empty_scores_zero(self):
        assert match_score("", "Glass") == 0.0


class TestClassifier:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Electricity (grid)", MaterialCategory.ENERGY),
            ("HGV transport", MaterialCategory.TRANSPORT),
            ("Landfill disposal", MaterialCategory.WASTE),
            ("Glass Bottle", MaterialCategory.PACKAGING),
            ("Paper Label", MaterialCategory.PACKAGING),
            ("Sugar", MaterialCategory.AGRICULTURAL),
            ("Citric Acid", MaterialCategory.AGRICULTURAL),
            ("Water", MaterialCategory.OTHER),
        ],
    )
    def test_detect_material_category(self, name, expected):
        assert detect_material_category(name) == expected


class TestFactorResolver:
    def test_supplier_match_is_primary(self, resolver):
        item = make_item("Glass Bottle", 0.2, source_reference="SUP-GLASS-01")
        record = resolver.resolve(item)
        assert record.tier == ProvenanceTier.PRIMARY
        assert record.confidence == 1.0
        assert record.climate == 0.72

    def test_unknown_supplier_reference_falls_through(self, resolver):
        item = make_item("Glass Bottle", 0.2, source_reference="SUP-UNKNOWN")
        record = resolver.resolve(item)
        assert record.tier == ProvenanceTier.SECONDARY

    def test_exact_proxy_match(self, resolver):
        record = resolver.resolve(make_item("Glass Bottle", 0.2))
        assert record.tier == ProvenanceTier.SECONDARY
        assert record.confidence == 1.0

    def test_fuzzy_proxy_confidence_is_match_score(self, resolver):
        record = resolver.resolve(make_item("Glass Bottle (green)", 0.2))
        assert record.factor_id == "f-glass-bottle"
        assert record.confidence == pytest.approx(match_score("Glass Bottle (green)", "Glass Bottle"))

    def test_alias_match(self, resolver):
        record = resolver.resolve(make_item("Beet Sugar", 0.02))
        assert record.name == "Sugar (beet)"
        assert record.confidence == 1.0

    def test_category_default_is_tertiary(self, resolver):
        record = resolver.resolve(make_item("Oat flakes", 0.05))
        assert record.tier == ProvenanceTier.TERTIARY
        assert record.confidence == pytest.approx(0.3)
        assert record.factor_id == "def-agri"

    def test_explicit_category_used_for_default(self, resolver):
        item = make_item("Widget", 1.0, category=MaterialCategory.PACKAGING)
        assert resolver.resolve(item).factor_id == "def-pack"

    def test_unresolvable_raises_data_not_found(self, resolver):
        with pytest.raises(DataNotFound) as exc:
            resolver.resolve(make_item("Mystery compound", 1.0))
        assert exc.value.material_name == "Mystery compound"

    def test_equal_scores_break_by_factor_id(self):
        source = ProxyCatalogSource(
            [
                make_factor("Glass", 2.0, factor_id="b-glass"),
                make_factor("Glass", 1.0, factor_id="a-glass"),
            ]
        )
        record = source.lookup(make_item("Glass", 1.0), MaterialCategory.PACKAGING)
        assert record.factor_id == "a-glass"

    def test_min_match_score_respected(self, catalog):
        strict = FactorResolver.from_catalog(catalog, ResolverSettings(min_match_score=0.99))
        record = strict.resolve(make_item("Glass Bottle (green)", 0.2))
        assert record.tier == ProvenanceTier.TERTIARY

    def test_resolve_all_collects_failures(self, resolver):
        items = [make_item("Glass Bottle", 0.2), make_item("Mystery compound", 1.0)]
        resolved, failed = resolver.resolve_all(items)
        assert [i.name for i, _ in resolved] == ["Glass Bottle"]
        assert len(failed) == 1
        assert failed[0].error_type == FailureType.DATA_NOT_FOUND
        assert failed[0].material_id == "mystery-compound"

    def test_resolve_all_sets_inferred_category(self, resolver):
        resolved, _ = resolver.resolve_all([make_item("Glass Bottle", 0.2)])
        item, _ = resolved[0]
        assert item.category == MaterialCategory.PACKAGING

    def test_resolution_is_pure(self, resolver):
        item = make_item("Glass Bottle (green)", 0.2)
        assert resolver.resolve(item) == resolver.resolve(item)
