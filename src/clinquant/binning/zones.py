"""Partition of the boundary list into classified zones."""

import logging
from typing import Iterable, List, Optional, Sequence

from ..exceptions import ConfigurationError
from ..types import ClinicalAnchor, NormalRange, Zone, ZoneKind, ZoneSpec

logger = logging.getLogger(__name__)

# Default bins per zone kind.
DEFAULT_BIN_COUNTS = {
    ZoneKind.BELOW: 3,
    ZoneKind.NORMAL: 5,
    ZoneKind.ABOVE_MILD: 5,
    ZoneKind.ABOVE_MODERATE: 4,
    ZoneKind.ABOVE_SEVERE: 3,
}


def classify_zone(
    lower: float,
    upper: float,
    normal_range: Optional[NormalRange] = None,
    anchor_values: Sequence[float] = (),
) -> ZoneKind:
    """Classify the zone ``[lower, upper]`` by its position.

    Above the normal range, severity follows the number of anchors already
    passed going outward, i.e. anchors ``a`` with
    ``normal_range.upper < a < lower``: none is mild, one is moderate,
    two or more is severe.
    """
    if normal_range is None:
        return ZoneKind.NORMAL
    if upper <= normal_range.lower:
        return ZoneKind.BELOW
    if lower >= normal_range.upper:
        passed = sum(1 for a in anchor_values if normal_range.upper < a < lower)
        if passed >= 2:
            return ZoneKind.ABOVE_SEVERE
        if passed == 1:
            return ZoneKind.ABOVE_MODERATE
        return ZoneKind.ABOVE_MILD
    return ZoneKind.NORMAL


def resolve_bin_count(
    lower: float,
    upper: float,
    kind: ZoneKind,
    zone_overrides: Iterable[ZoneSpec] = (),
) -> int:
    """Return the first matching override's bin count, else the default."""
    for override in zone_overrides:
        if override.matches(lower, upper):
            return int(override.bin_count)
    return DEFAULT_BIN_COUNTS[kind]


def classify_zones(
    boundaries: Sequence[float],
    normal_range: Optional[NormalRange] = None,
    anchors: Iterable[ClinicalAnchor] = (),
    zone_overrides: Iterable[ZoneSpec] = (),
) -> List[Zone]:
    """Build one zone per consecutive pair of boundaries.

    Parameters
    ----------
    boundaries : sequence of float
        Strictly increasing boundaries from
        :func:`~clinquant.binning.boundaries.collect_boundaries`.
    normal_range : NormalRange, optional
        Without a normal range every zone is ``normal``.
    anchors : iterable of ClinicalAnchor
        Anchors used to grade zones above the normal range.
    zone_overrides : iterable of ZoneSpec
        Caller bin counts, matched on both bounds within tolerance.

    Returns
    -------
    list of Zone
        Zones in ascending order. A single boundary gives one zero-width
        zone.

    Raises
    ------
    ConfigurationError
        If any resolved bin count is not positive. No zones are
        returned in that case.
    """
    if not boundaries:
        raise ConfigurationError("Cannot build zones from an empty boundary list")

    anchor_values = [float(a.value) for a in anchors]
    overrides = list(zone_overrides)

    if len(boundaries) == 1:
        pairs = [(boundaries[0], boundaries[0])]
    else:
        pairs = list(zip(boundaries[:-1], boundaries[1:]))

    zones = []
    for lower, upper in pairs:
        kind = classify_zone(lower, upper, normal_range, anchor_values)
        bin_count = resolve_bin_count(lower, upper, kind, overrides)
        if bin_count <= 0:
            raise ConfigurationError(
                f"Invalid bin count: {bin_count} for zone [{lower}, {upper}]. "
                "Must be positive."
            )
        zones.append(Zone(lower, upper, kind, bin_count))
        logger.debug("zone [%s, %s] kind=%s bins=%d", lower, upper, kind.value, bin_count)

    return zones
