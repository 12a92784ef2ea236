"""Tests for input validation."""

import numpy as np

from clinquant.types import (
    ClinicalAnchor,
    DataRange,
    ECDFPoint,
    NormalRange,
    Severity,
    TokenBin,
    ZoneCategory,
)
from clinquant.validation import (
    check_bin_sparsity,
    validate_anchors,
    validate_configuration,
    validate_distribution,
    validate_normal_range,
)

from conftest import make_ecdf


def fields(messages):
    return [m.field for m in messages]


class TestValidateDistribution:

    def test_clean_distribution(self, uniform_ecdf):
        report = validate_distribution(uniform_ecdf)

        assert report.valid
        assert report.warnings == []

    def test_empty(self):
        report = validate_distribution([])

        assert not report.valid
        assert "No ECDF data" in report.errors[0].message

    def test_decreasing_probabilities(self):
        points = make_ecdf(0, 10, 20)
        points[5] = ECDFPoint(points[5].value, 0.9)
        report = validate_distribution(points)

        assert not report.valid
        assert any("monotonically" in m.message for m in report.errors)

    def test_probability_out_of_range(self):
        points = make_ecdf(0, 10, 20) + [ECDFPoint(11.0, 1.5)]
        report = validate_distribution(points)

        assert any("out of range" in m.message for m in report.errors)

    def test_unsorted_values(self):
        points = make_ecdf(0, 10, 20)
        points[4] = ECDFPoint(points[2].value, points[4].cumulative_probability)
        report = validate_distribution(points)

        assert any("ascending" in m.message for m in report.errors)

    def test_warnings(self):
        points = [(1.0, 0.2), (1.0, 0.5), (2.0, 0.8)]
        report = validate_distribution(points)

        assert report.valid
        messages = " ".join(m.message for m in report.warnings)
        assert "Only 3 data points" in messages
        assert "Duplicate values" in messages
        assert "near 0" in messages
        assert "near 1" in messages


class TestValidateNormalRange:

    def test_missing(self):
        report = validate_normal_range(None)
        assert report.errors[0].message == "Normal range is required."

    def test_inverted(self):
        assert not validate_normal_range(NormalRange(5, 5)).valid

    def test_beyond_data_range(self):
        report = validate_normal_range(NormalRange(-1, 5), DataRange(0, 10))

        assert report.valid
        assert any("extends beyond" in m.message for m in report.warnings)

    def test_wide_normal_range(self):
        report = validate_normal_range(NormalRange(0.5, 9.5), DataRange(0, 10))
        assert any(">80%" in m.message for m in report.warnings)


class TestValidateAnchors:

    def test_no_anchors_warns(self):
        report = validate_anchors([])

        assert report.valid
        assert fields(report.warnings) == ["anchors"]

    def test_duplicates_are_errors(self, sepsis_anchors):
        report = validate_anchors(sepsis_anchors + [ClinicalAnchor(2.0, evidence="x")])

        assert not report.valid
        assert "2.0" in report.errors[0].message

    def test_context_warnings(self):
        anchors = [ClinicalAnchor(2.0, evidence="SSC"), ClinicalAnchor(12.0)]
        report = validate_anchors(anchors, NormalRange(0.5, 2.0), DataRange(0, 10))

        messages = [m.message for m in report.warnings]
        assert any("outside data range" in m for m in messages)
        assert any("coincides with normal range" in m for m in messages)
        assert any("missing evidence" in m for m in messages)
        assert len(messages) == 3


class TestValidateConfiguration:

    def test_valid_configuration(self, lactate_config, uniform_ecdf):
        report = validate_configuration(lactate_config, uniform_ecdf, DataRange(0, 10))

        assert report.valid

    def test_missing_fields(self):
        report = validate_configuration({"zone_overrides": [{"lower": 0, "upper": 1, "bin_count": 0}]})

        assert set(fields(report.errors)) == {"name", "direction", "zone_overrides"}
        assert "unit" in fields(report.warnings)

    def test_collects_nested_errors(self, lactate_config):
        config = dict(lactate_config, normal_range={"lower": 3, "upper": 1})
        report = validate_configuration(config, [], {"min": 0, "max": 10})

        assert "normal_range" in fields(report.errors)

    def test_array_distribution(self, lactate_config, uniform_ecdf):
        """A numpy array of (value, probability) rows is validated like a list."""
        points = np.array([(p.value, p.cumulative_probability) for p in uniform_ecdf])
        report = validate_configuration(lactate_config, points, DataRange(0, 10))

        assert report.valid
        assert "distribution" not in fields(report.warnings)

    def test_empty_distribution_reported(self, lactate_config):
        report = validate_configuration(lactate_config, [], DataRange(0, 10))

        assert "distribution" in fields(report.errors)


class TestBinSparsity:

    def test_sparse_bins(self):
        bins = [TokenBin("a", 0, 1, 0.5, Severity.NORMAL, ZoneCategory.NORMAL),
                TokenBin("b", 1, 2, 99.5, Severity.NORMAL, ZoneCategory.NORMAL)]
        messages = check_bin_sparsity(bins)

        assert len(messages) == 1
        assert "Bin 1" in messages[0].message
        assert messages[0].severity == "warning"
