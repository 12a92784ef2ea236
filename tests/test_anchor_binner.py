"""Tests for generate_bins and anchor preservation."""

import json

import numpy as np
import pytest

from clinquant import ConfigurationError, generate_bins, validate_anchor_preservation
from clinquant.types import (
    ClinicalAnchor,
    DataRange,
    Direction,
    NormalRange,
    Severity,
    TokenBin,
    VariableConfig,
    ZoneCategory,
    ZoneSpec,
)
from clinquant.utils.ecdf import build_ecdf, data_range_of

from conftest import make_ecdf


def assert_contiguous(bins):
    for prev, nxt in zip(bins[:-1], bins[1:]):
        assert prev.upper == nxt.lower


class TestAnchorPreservation:
    """Anchors must be exact bin boundaries."""

    def test_sepsis_anchors(self, uniform_ecdf, lactate_config):
        """Lactate anchors at 2.0 and 4.0 survive as bin edges."""
        bins = generate_bins(lactate_config, uniform_ecdf, {"min": 0, "max": 10})

        edges = {b.lower for b in bins} | {b.upper for b in bins}
        assert 2.0 in edges
        assert 4.0 in edges
        assert validate_anchor_preservation(bins, [2.0, 4.0])

    def test_validator_detects_missing_anchor(self, uniform_ecdf):
        bins = generate_bins(VariableConfig(name="x"), uniform_ecdf, DataRange(0, 10))

        assert not validate_anchor_preservation(bins, [3.3])

    def test_validator_tolerance(self):
        bins = [TokenBin("a", 0.0, 2.0, 50.0, Severity.NORMAL, ZoneCategory.NORMAL),
                TokenBin("b", 2.0, 4.0, 50.0, Severity.MILD, ZoneCategory.ABOVE)]

        assert validate_anchor_preservation(bins, [2.0005])
        assert not validate_anchor_preservation(bins, [2.002])
        assert validate_anchor_preservation(bins, [])
        assert not validate_anchor_preservation([], [1.0])

    def test_anchor_outside_data_range(self, uniform_ecdf):
        """Out-of-range anchors extend the vocabulary with empty bins."""
        config = VariableConfig(normal_range=NormalRange(2, 8), anchors=(ClinicalAnchor(12.0),))
        bins = generate_bins(config, uniform_ecdf, DataRange(0, 10))

        assert bins[-1].upper == 12.0
        assert bins[-1].data_percentage == 0.0
        assert validate_anchor_preservation(bins, [12.0])

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_random_configurations(self, seed):
        """Invariants hold for random distributions and anchor sets."""
        rng = np.random.default_rng(seed)
        ecdf = build_ecdf(rng.lognormal(mean=1.0, sigma=0.6, size=500))
        data_range = data_range_of(ecdf)

        span = data_range.max - data_range.min
        lower = data_range.min + 0.2 * span
        upper = data_range.min + 0.4 * span
        anchor_values = np.unique(np.round(rng.uniform(upper, data_range.max, size=3), 3))
        anchor_values = anchor_values[anchor_values < data_range.max]
        config = VariableConfig(
            name="random",
            direction=Direction.BIDIRECTIONAL,
            normal_range=NormalRange(lower, upper),
            anchors=tuple(ClinicalAnchor(float(v)) for v in anchor_values),
        )

        bins = generate_bins(config, ecdf, data_range)

        assert bins[0].lower == data_range.min
        assert bins[-1].upper == data_range.max
        assert_contiguous(bins)
        assert validate_anchor_preservation(bins, anchor_values)
        assert 99 <= sum(b.data_percentage for b in bins) <= 101


class TestScenarios:
    """End-to-end scenarios."""

    def test_three_zones_without_anchors(self, uniform_ecdf):
        config = {"name": "test", "normal_range": {"lower": 2, "upper": 8}, "anchors": []}
        bins = generate_bins(config, uniform_ecdf, DataRange(0, 10))

        below = [b for b in bins if b.zone_category is ZoneCategory.BELOW]
        normal = [b for b in bins if b.zone_category is ZoneCategory.NORMAL]
        above = [b for b in bins if b.zone_category is ZoneCategory.ABOVE]
        assert (below[0].lower, below[-1].upper) == (0.0, 2.0)
        assert (normal[0].lower, normal[-1].upper) == (2.0, 8.0)
        assert (above[0].lower, above[-1].upper) == (8.0, 10.0)
        assert all("above_mild" in b.id for b in above)
        assert len(bins) == 3 + 5 + 5

    def test_last_bin_includes_maximum(self, uniform_ecdf):
        config = VariableConfig(name="test", normal_range=NormalRange(2, 8))
        bins = generate_bins(config, uniform_ecdf, DataRange(0, 10))

        last = bins[-1]
        assert last.upper == 10
        assert last.contains(10, closed=True)

    def test_empty_zone(self):
        """A zone with no observations becomes a single 0% bin."""
        ecdf = make_ecdf(0.0, 5.0, 50)
        config = VariableConfig(name="sparse", normal_range=NormalRange(2, 8))
        bins = generate_bins(config, ecdf, DataRange(0, 10))

        tail = [b for b in bins if b.lower >= 8.0]
        assert len(tail) == 1
        assert tail[0].data_percentage == 0.0
        assert (tail[0].lower, tail[0].upper) == (8.0, 10.0)

    def test_zero_bin_count_raises(self, uniform_ecdf):
        config = VariableConfig(
            normal_range=NormalRange(2, 8),
            zone_overrides=(ZoneSpec(8.0, 10.0, 0),),
        )
        with pytest.raises(ConfigurationError):
            generate_bins(config, uniform_ecdf, DataRange(0, 10))

    def test_severity_by_direction(self, uniform_ecdf, lactate_config):
        bins = generate_bins(lactate_config, uniform_ecdf, DataRange(0, 10))
        by_range = {}
        for b in bins:
            if b.upper <= 0.5:
                by_range.setdefault("below", set()).add(b.severity)
            elif b.upper <= 2.0:
                by_range.setdefault("normal", set()).add(b.severity)
            elif b.upper <= 4.0:
                by_range.setdefault("first_above", set()).add(b.severity)
            else:
                by_range.setdefault("second_above", set()).add(b.severity)

        assert by_range["below"] == {Severity.MILD}
        assert by_range["normal"] == {Severity.NORMAL}
        assert by_range["first_above"] == {Severity.MILD}
        assert by_range["second_above"] == {Severity.MILD}

    def test_lactate_upper_zones_both_mild(self, uniform_ecdf, lactate_config):
        bins = generate_bins(lactate_config, uniform_ecdf, DataRange(0, 10))
        upper = [b for b in bins if b.lower >= 2.0]

        assert upper
        assert all("_above_mild_" in b.id for b in upper)
        assert not any("above_moderate" in b.id for b in bins)


class TestProperties:
    """General properties of the output."""

    def test_coverage_and_contiguity(self, uniform_ecdf, lactate_config):
        bins = generate_bins(lactate_config, uniform_ecdf, DataRange(0, 10))

        assert bins[0].lower == 0
        assert bins[-1].upper == 10
        assert_contiguous(bins)
        assert [b.lower for b in bins] == sorted(b.lower for b in bins)

    def test_percentage_conservation(self, uniform_ecdf):
        config = VariableConfig(name="test", normal_range=NormalRange(3, 7))
        bins = generate_bins(config, uniform_ecdf, DataRange(0, 10))

        total = sum(b.data_percentage for b in bins)
        assert 99 <= total <= 101

    def test_idempotent(self, uniform_ecdf, lactate_config):
        first = generate_bins(lactate_config, uniform_ecdf, DataRange(0, 10))
        second = generate_bins(lactate_config, uniform_ecdf, DataRange(0, 10))

        assert first == second
        assert json.dumps([b.to_dict() for b in first]) == json.dumps([b.to_dict() for b in second])

    def test_single_bin_override(self, uniform_ecdf):
        config = VariableConfig(
            normal_range=NormalRange(2, 8),
            zone_overrides=(ZoneSpec(2.0, 8.0, 1),),
        )
        bins = generate_bins(config, uniform_ecdf, DataRange(0, 10))

        normal = [b for b in bins if b.zone_category is ZoneCategory.NORMAL]
        assert len(normal) == 1
        assert (normal[0].lower, normal[0].upper) == (2.0, 8.0)

    def test_single_bin_counts_closed_zone(self):
        """A one-bin zone counts observations on both of its edges."""
        points = [(float(i), (i + 1) / 11) for i in range(11)]
        config = VariableConfig(
            normal_range=NormalRange(2, 8),
            zone_overrides=(ZoneSpec(2.0, 8.0, 1),),
        )
        bins = generate_bins(config, points, DataRange(0, 10))

        normal = [b for b in bins if b.zone_category is ZoneCategory.NORMAL]
        assert len(normal) == 1
        assert normal[0].data_percentage == round(100 * 7 / 11, 2)

    def test_ids_unique(self, uniform_ecdf, lactate_config):
        bins = generate_bins(lactate_config, uniform_ecdf, DataRange(0, 10))
        ids = [b.id for b in bins]

        assert len(ids) == len(set(ids))
        assert all(i.startswith("lactate_") for i in ids)

    def test_no_configuration(self, uniform_ecdf):
        """An empty config bins the whole range as one normal zone."""
        bins = generate_bins({}, uniform_ecdf, (0, 10))

        assert len(bins) == 5
        assert {b.zone_category for b in bins} == {ZoneCategory.NORMAL}
        assert all(b.id.startswith("variable_normal_") for b in bins)

    def test_pairs_distribution(self):
        pairs = [(float(v), (i + 1) / 20) for i, v in enumerate(range(20))]
        bins = generate_bins(VariableConfig(), pairs, DataRange(0, 19))

        assert sum(b.data_percentage for b in bins) == pytest.approx(100, abs=0.1)

    def test_single_point_distribution(self):
        bins = generate_bins(VariableConfig(), [(3.0, 1.0)], DataRange(3.0, 3.0))

        assert len(bins) == 1
        assert bins[0].data_percentage == 100.0


class TestConfigurationErrors:

    def test_malformed_normal_range(self, uniform_ecdf):
        config = VariableConfig(normal_range=NormalRange(8, 2))
        with pytest.raises(ConfigurationError):
            generate_bins(config, uniform_ecdf, DataRange(0, 10))

    def test_empty_distribution(self):
        with pytest.raises(ConfigurationError):
            generate_bins(VariableConfig(), [], DataRange(0, 10))

    def test_inverted_data_range(self, uniform_ecdf):
        with pytest.raises(ConfigurationError):
            generate_bins(VariableConfig(), uniform_ecdf, DataRange(10, 0))

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)
