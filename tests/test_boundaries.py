"""Tests for boundary collection and zone classification."""

import pytest

from clinquant.binning.boundaries import collect_boundaries
from clinquant.binning.zones import DEFAULT_BIN_COUNTS, classify_zone, classify_zones
from clinquant.exceptions import ConfigurationError
from clinquant.types import ClinicalAnchor, DataRange, NormalRange, ZoneKind, ZoneSpec


class TestCollectBoundaries:
    """Test cases for collect_boundaries."""

    def test_data_range_only(self):
        """Without anchors or normal range only the extremes remain."""
        assert collect_boundaries(DataRange(0, 10)) == [0.0, 10.0]

    def test_sorted_and_unique(self):
        """Anchors on normal-range edges merge into one boundary."""
        anchors = [ClinicalAnchor(4.0), ClinicalAnchor(2.0)]
        boundaries = collect_boundaries(DataRange(0, 10), NormalRange(0.5, 2.0), anchors)

        assert boundaries == [0.0, 0.5, 2.0, 4.0, 10.0]

    def test_no_tolerance_merging(self):
        """Values closer than the anchor tolerance stay distinct."""
        anchors = [ClinicalAnchor(2.0005)]
        boundaries = collect_boundaries(DataRange(0, 10), NormalRange(1.0, 2.0), anchors)

        assert 2.0 in boundaries
        assert 2.0005 in boundaries

    def test_anchor_outside_data_range(self):
        boundaries = collect_boundaries(DataRange(0, 10), anchors=[ClinicalAnchor(12.0)])
        assert boundaries == [0.0, 10.0, 12.0]


class TestClassifyZones:
    """Test cases for zone classification."""

    def test_no_normal_range(self):
        """Every zone is normal with the default count."""
        zones = classify_zones([0.0, 3.0, 10.0])

        assert [z.kind for z in zones] == [ZoneKind.NORMAL, ZoneKind.NORMAL]
        assert all(z.bin_count == DEFAULT_BIN_COUNTS[ZoneKind.NORMAL] for z in zones)

    def test_three_zones(self):
        zones = classify_zones([0.0, 2.0, 8.0, 10.0], NormalRange(2, 8))

        assert [(z.lower, z.upper, z.kind) for z in zones] == [
            (0.0, 2.0, ZoneKind.BELOW),
            (2.0, 8.0, ZoneKind.NORMAL),
            (8.0, 10.0, ZoneKind.ABOVE_MILD),
        ]
        assert [z.bin_count for z in zones] == [3, 5, 5]

    def test_severity_escalates_with_passed_anchors(self):
        """Anchors strictly between the normal upper bound and the zone raise its grade."""
        anchors = [ClinicalAnchor(v) for v in (2.0, 4.0, 8.0, 15.0)]
        boundaries = collect_boundaries(DataRange(0, 20), NormalRange(0.5, 2.0), anchors)
        zones = classify_zones(boundaries, NormalRange(0.5, 2.0), anchors)

        kinds = {(z.lower, z.upper): z.kind for z in zones}
        assert kinds[(0.0, 0.5)] == ZoneKind.BELOW
        assert kinds[(0.5, 2.0)] == ZoneKind.NORMAL
        assert kinds[(2.0, 4.0)] == ZoneKind.ABOVE_MILD
        assert kinds[(4.0, 8.0)] == ZoneKind.ABOVE_MILD
        assert kinds[(8.0, 15.0)] == ZoneKind.ABOVE_MODERATE
        assert kinds[(15.0, 20.0)] == ZoneKind.ABOVE_SEVERE

    def test_anchor_at_zone_lower_edge_not_counted(self):
        """Lactate anchors 2 and 4 over [0, 10] leave both upper zones mild."""
        anchors = [ClinicalAnchor(2.0), ClinicalAnchor(4.0)]
        boundaries = collect_boundaries(DataRange(0, 10), NormalRange(0.5, 2.0), anchors)
        zones = classify_zones(boundaries, NormalRange(0.5, 2.0), anchors)

        kinds = {(z.lower, z.upper): z.kind for z in zones}
        assert kinds[(2.0, 4.0)] == ZoneKind.ABOVE_MILD
        assert kinds[(4.0, 10.0)] == ZoneKind.ABOVE_MILD
        assert classify_zone(4.0, 10.0, NormalRange(0.5, 2.0), [2.0, 4.0]) == ZoneKind.ABOVE_MILD
        assert classify_zone(4.0001, 10.0, NormalRange(0.5, 2.0), [2.0, 4.0]) == \
            ZoneKind.ABOVE_MODERATE

    def test_classification_ignores_anchor_order(self):
        forward = [ClinicalAnchor(3.0), ClinicalAnchor(5.0)]
        backward = list(reversed(forward))

        assert classify_zone(5.0, 10.0, NormalRange(1, 2), [a.value for a in forward]) == \
            classify_zone(5.0, 10.0, NormalRange(1, 2), [a.value for a in backward])

    def test_straddling_zone_is_normal(self):
        assert classify_zone(1.0, 3.0, NormalRange(2, 8)) == ZoneKind.NORMAL

    def test_override_within_tolerance(self):
        """An override matching both bounds within 1e-3 replaces the default."""
        zones = classify_zones(
            [0.0, 2.0, 8.0, 10.0],
            NormalRange(2, 8),
            zone_overrides=[ZoneSpec(2.0004, 7.9996, 7)],
        )
        assert zones[1].bin_count == 7

    def test_override_outside_tolerance_ignored(self):
        zones = classify_zones(
            [0.0, 2.0, 8.0, 10.0],
            NormalRange(2, 8),
            zone_overrides=[ZoneSpec(2.01, 8.0, 7)],
        )
        assert zones[1].bin_count == 5

    def test_zero_bin_count_rejected(self):
        with pytest.raises(ConfigurationError):
            classify_zones([0.0, 2.0, 10.0], NormalRange(2, 8),
                           zone_overrides=[ZoneSpec(2.0, 10.0, 0)])

    def test_negative_bin_count_rejected(self):
        with pytest.raises(ConfigurationError):
            classify_zones([0.0, 10.0], zone_overrides=[ZoneSpec(0.0, 10.0, -2)])

    def test_single_boundary(self):
        """A degenerate range yields one zero-width zone."""
        zones = classify_zones([5.0])

        assert len(zones) == 1
        assert zones[0].lower == zones[0].upper == 5.0
