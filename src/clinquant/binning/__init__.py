"""Anchor-first binning stages."""

from .anchor_binner import generate_bins, validate_anchor_preservation
from .boundaries import collect_boundaries
from .intra_zone import SubBin, bin_zone
from .labels import SEVERITY_TABLE, severity_for
from .zones import DEFAULT_BIN_COUNTS, classify_zones

__all__ = [
    "generate_bins",
    "validate_anchor_preservation",
    "collect_boundaries",
    "classify_zones",
    "bin_zone",
    "SubBin",
    "SEVERITY_TABLE",
    "severity_for",
    "DEFAULT_BIN_COUNTS",
]
