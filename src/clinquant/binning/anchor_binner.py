"""Anchor-first binning of a continuous clinical variable.

Algorithm:
  1. Collect boundaries: data extremes, normal-range edges, anchors.
  2. Classify the zones between consecutive boundaries.
  3. Split each zone into quantile sub-bins of its own data.
  4. Label every sub-bin with an id, a severity and a zone category.

Anchors are zone edges and quantile cuts never leave their zone, so every
anchor ends up as an exact bin edge.
"""

import logging
from typing import Any, Iterable, List, Sequence

import numpy as np

from ..exceptions import ConfigurationError
from ..types import ANCHOR_TOLERANCE, DataRange, ECDFPoint, TokenBin, VariableConfig
from .boundaries import collect_boundaries
from .intra_zone import bin_zone
from .labels import label_bins
from .zones import classify_zones

logger = logging.getLogger(__name__)


def _distribution_values(distribution: Iterable[Any]) -> np.ndarray:
    values = [ECDFPoint.from_obj(p).value for p in distribution]
    return np.sort(np.asarray(values, dtype=float))


def generate_bins(variable_config: Any, distribution: Sequence[Any], data_range: Any) -> List[TokenBin]:
    """Generate the token bins of one variable.

    Parameters
    ----------
    variable_config : VariableConfig or mapping
        Name, direction, normal range, anchors and zone overrides. Mappings
        are parsed with :meth:`VariableConfig.from_dict`.
    distribution : sequence
        Empirical CDF sample as ``ECDFPoint`` objects, mappings or
        ``(value, cumulative_probability)`` pairs. Assumed validated
        upstream (see :mod:`clinquant.validation`).
    data_range : DataRange, mapping or pair
        Observed minimum and maximum; must bound the distribution.

    Returns
    -------
    list of TokenBin
        Contiguous bins sorted by ``lower``. The last bin is closed.

    Raises
    ------
    ConfigurationError
        For an empty distribution, an inverted data range, a normal range
        with ``lower >= upper`` or a non-positive bin count in any zone.
    """
    config = VariableConfig.from_obj(variable_config)
    data_range = DataRange.from_obj(data_range)
    values = _distribution_values(distribution)

    if values.size == 0:
        raise ConfigurationError("Cannot generate bins from an empty distribution")
    if data_range.min > data_range.max:
        raise ConfigurationError(
            f"Data range min {data_range.min} exceeds max {data_range.max}"
        )
    normal_range = config.normal_range
    if normal_range is not None and normal_range.lower >= normal_range.upper:
        raise ConfigurationError(
            f"Normal range lower bound {normal_range.lower} must be less than "
            f"upper bound {normal_range.upper}"
        )

    boundaries = collect_boundaries(data_range, normal_range, config.anchors)
    zones = classify_zones(boundaries, normal_range, config.anchors, config.zone_overrides)

    last = len(zones) - 1
    zoned = [(zone, bin_zone(zone, values, closed_upper=(i == last))) for i, zone in enumerate(zones)]
    bins = label_bins(zoned, name=config.name, direction=config.resolved_direction)

    logger.debug(
        "generated %d bins over %d zones for %s",
        len(bins), len(zones), config.name or "variable",
    )
    return bins


def validate_anchor_preservation(bins: Iterable[TokenBin], anchor_values: Iterable[float]) -> bool:
    """Check that every anchor value is a bin edge within tolerance.

    Parameters
    ----------
    bins : iterable of TokenBin
        Bins as produced by :func:`generate_bins` or loaded from storage.
    anchor_values : iterable of float
        Anchor values to look for.

    Returns
    -------
    bool
        True when each anchor lies within ``ANCHOR_TOLERANCE`` of some
        ``lower`` or ``upper`` edge. Vacuously true without anchors.
    """
    edges = set()
    for b in bins:
        edges.add(float(b.lower))
        edges.add(float(b.upper))
    edge_array = np.fromiter(edges, dtype=float, count=len(edges))

    for anchor in anchor_values:
        if edge_array.size == 0 or np.min(np.abs(edge_array - float(anchor))) >= ANCHOR_TOLERANCE:
            return False
    return True
