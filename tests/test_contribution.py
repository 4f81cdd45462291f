"""Tests for contribution analysis."""

import pytest

from lca_engine.engine import ContributionAnalyzer
from lca_engine.models.enums import ImpactCategory
from tests.conftest import make_factor, make_item


@pytest.fixture
def analyzer():
    return ContributionAnalyzer(dominant_pct=40.0, significant_pct=10.0)


def _aggregate(aggregator, values):
    """Aggregate materials with quantity 1 kg and the given climate factors."""
    pairs = [(make_item(name, 1.0), make_factor(name, value)) for name, value in values]
    return aggregator.aggregate(pairs)


def _climate(analyzer, aggregate):
    return analyzer.analyze(aggregate.breakdown(ImpactCategory.CLIMATE), aggregate.materials)


class TestContributionAnalyzer:
    def test_sorted_descending(self, analyzer, aggregator):
        aggregate = _aggregate(aggregator, [("C", 5), ("A", 50), ("B", 30), ("D", 15)])
        result = _climate(analyzer, aggregate)
        assert [r.material for r in result.records] == ["A", "B", "D", "C"]

    def test_classification(self, analyzer, aggregator):
        aggregate = _aggregate(aggregator, [("A", 50), ("B", 30), ("D", 15), ("C", 5)])
        records = {r.material: r for r in _climate(analyzer, aggregate).records}
        assert records["A"].is_dominant and not records["A"].is_significant
        assert records["B"].is_significant and not records["B"].is_dominant
        assert records["D"].is_significant
        assert not records["C"].is_significant and not records["C"].is_dominant

    def test_percentages(self, analyzer, aggregator):
        aggregate = _aggregate(aggregator, [("A", 50), ("B", 30), ("D", 15), ("C", 5)])
        records = {r.material: r for r in _climate(analyzer, aggregate).records}
        assert records["A"].percentage == pytest.approx(50.0)
        assert records["C"].percentage == pytest.approx(5.0)
        assert records["C"].absolute_value == pytest.approx(5.0)

    def test_percentages_sum_to_100(self, analyzer, aggregator, beverage_pairs):
        aggregate = aggregator.aggregate(beverage_pairs)
        result = _climate(analyzer, aggregate)
        assert sum(r.percentage for r in result.records) == pytest.approx(100.0, abs=0.1)

    def test_ties_broken_by_ascending_name(self, analyzer, aggregator):
        aggregate = _aggregate(aggregator, [("Zinc", 1.0), ("Beta", 2.0), ("Alpha", 2.0)])
        result = _climate(analyzer, aggregate)
        assert [r.material for r in result.records] == ["Alpha", "Beta", "Zinc"]

    def test_zero_total(self, analyzer, aggregator):
        aggregate = _aggregate(aggregator, [("A", 0.0), ("B", 0.0)])
        result = _climate(analyzer, aggregate)
        assert result.total == 0.0
        assert all(r.percentage == 0.0 for r in result.records)
        assert not any(r.is_dominant or r.is_significant for r in result.records)
        assert result.significant_issues == ()

    def test_dominant_issue(self, analyzer, aggregator, beverage_pairs):
        result = _climate(analyzer, aggregator.aggregate(beverage_pairs))
        assert result.dominant[0].material == "Glass Bottle"
        assert any(
            issue.startswith("Glass Bottle dominates Climate Change impact at 89.")
            for issue in result.significant_issues
        )

    def test_concentration_issue(self, analyzer, aggregator):
        aggregate = _aggregate(aggregator, [("A", 50), ("B", 30), ("D", 15), ("C", 5)])
        result = _climate(analyzer, aggregate)
        assert any("concentrated in 2 of 4 materials" in i for i in result.significant_issues)

    def test_stage_and_id_on_records(self, analyzer, aggregator, beverage_pairs):
        result = _climate(analyzer, aggregator.aggregate(beverage_pairs))
        top = result.records[0]
        assert top.material_id == "glass-bottle"
        assert top.stage.value == "packaging"

    def test_thresholds_configurable(self, aggregator):
        analyzer = ContributionAnalyzer(dominant_pct=60.0, significant_pct=20.0)
        aggregate = _aggregate(aggregator, [("A", 50), ("B", 30), ("D", 15), ("C", 5)])
        records = {r.material: r for r in _climate(analyzer, aggregate).records}
        assert not records["A"].is_dominant
        assert records["A"].is_significant
        assert not records["D"].is_significant

    def test_invalid_thresholds_rejected(self):
        with pytest.raises(ValueError):
            ContributionAnalyzer(dominant_pct=10.0, significant_pct=40.0)
