"""Quantile splitting of a single zone.

Within a zone, cut points sit at equally spaced order statistics of the
observations that fall inside the zone, so each sub-bin holds roughly the
same share of the zone's data. Zone edges are never moved.
"""

from typing import List, NamedTuple

import numpy as np

from ..types import Zone


class SubBin(NamedTuple):
    lower: float
    upper: float
    data_percentage: float


def coverage(values: np.ndarray, lower: float, upper: float, closed: bool = False) -> float:
    """Percentage of ``values`` inside ``[lower, upper)`` (or ``[lower, upper]``).

    Parameters
    ----------
    values : np.ndarray
        All observed values of the variable, sorted ascending.
    lower, upper : float
        Interval edges.
    closed : bool
        Whether ``upper`` itself belongs to the interval.

    Returns
    -------
    float
        Share of the full distribution, in percent.
    """
    if values.size == 0:
        return 0.0
    lo = np.searchsorted(values, lower, side="left")
    hi = np.searchsorted(values, upper, side="right" if closed else "left")
    return 100.0 * max(int(hi - lo), 0) / values.size


def quantile_cuts(zone_values: np.ndarray, bin_count: int) -> np.ndarray:
    """Interior cut points at positions ``i / bin_count``, ``i = 1..bin_count-1``."""
    positions = np.arange(1, bin_count) / bin_count
    return np.quantile(zone_values, positions)


def bin_zone(zone: Zone, values: np.ndarray, closed_upper: bool = False) -> List[SubBin]:
    """Split ``zone`` into ``zone.bin_count`` contiguous sub-bins.

    Parameters
    ----------
    zone : Zone
        Zone to split; its bin count is assumed positive.
    values : np.ndarray
        All observed values of the variable, sorted ascending.
    closed_upper : bool
        True for the last zone of the variable: its last sub-bin then
        includes ``zone.upper`` so the maximum is counted exactly once.

    Returns
    -------
    list of SubBin
        Sub-bins from ``zone.lower`` to ``zone.upper``. A zone without data,
        a single-bin zone and a zero-width zone each give one sub-bin; the
        latter two count every observation in the closed zone.
    """
    start = np.searchsorted(values, zone.lower, side="left")
    stop = np.searchsorted(values, zone.upper, side="right")
    zone_values = values[start:stop]

    if zone_values.size == 0:
        return [SubBin(zone.lower, zone.upper, 0.0)]

    if zone.bin_count == 1 or zone.lower == zone.upper:
        pct = 100.0 * zone_values.size / values.size
        return [SubBin(zone.lower, zone.upper, pct)]

    cuts = quantile_cuts(zone_values, zone.bin_count)
    edges = [zone.lower] + [float(c) for c in cuts] + [zone.upper]

    sub_bins = []
    last = len(edges) - 2
    for i, (lower, upper) in enumerate(zip(edges[:-1], edges[1:])):
        closed = closed_upper and i == last
        sub_bins.append(SubBin(lower, upper, coverage(values, lower, upper, closed=closed)))
    return sub_bins
