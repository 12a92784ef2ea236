"""Shared fixtures for clinquant tests."""

import pytest

from clinquant.types import ClinicalAnchor, ECDFPoint


def make_ecdf(lo, hi, n):
    """Evenly spaced ECDF sample with n points from lo to hi."""
    return [ECDFPoint(lo + (hi - lo) * i / (n - 1), i / (n - 1)) for i in range(n)]


@pytest.fixture
def uniform_ecdf():
    """100 points uniformly covering [0, 10]."""
    return make_ecdf(0.0, 10.0, 100)


@pytest.fixture
def lactate_config():
    return {
        "name": "lactate",
        "unit": "mmol/L",
        "direction": "higher_is_worse",
        "normal_range": {"lower": 0.5, "upper": 2.0},
        "anchors": [
            {"value": 2.0, "label": "Sepsis threshold", "evidence": "SSC 2021"},
            {"value": 4.0, "label": "Severe sepsis", "evidence": "SSC 2021"},
        ],
    }


@pytest.fixture
def sepsis_anchors():
    return [
        ClinicalAnchor(2.0, "Sepsis threshold", "SSC 2021"),
        ClinicalAnchor(4.0, "Severe sepsis", "SSC 2021"),
    ]
