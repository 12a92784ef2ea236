"""Empirical CDF helpers.

Builds the (value, cumulative probability) sample the binning consumes from
raw measurements, and coerces caller-supplied distributions.
"""

from typing import Any, Iterable, List

import numpy as np
from scipy import stats

from ..types import DataRange, ECDFPoint


def build_ecdf(samples: Iterable[float]) -> List[ECDFPoint]:
    """Compute the empirical CDF of raw measurements.

    Parameters
    ----------
    samples : iterable of float
        Raw observations. NaN and infinite values are dropped.

    Returns
    -------
    list of ECDFPoint
        One point per distinct value, sorted ascending, with the
        probability of observing a value less than or equal to it.

    Raises
    ------
    ValueError
        If no finite sample remains.
    """
    x = np.asarray(list(samples), dtype=float)
    x = x[np.isfinite(x)]
    if x.size == 0:
        raise ValueError("Cannot build an ECDF without finite samples")
    cdf = stats.ecdf(x).cdf
    return [
        ECDFPoint(float(v), float(p))
        for v, p in zip(cdf.quantiles, cdf.probabilities)
    ]


def as_distribution(points: Iterable[Any]) -> List[ECDFPoint]:
    """Coerce points, mappings or ``(value, probability)`` pairs."""
    return [ECDFPoint.from_obj(p) for p in points]


def data_range_of(points: Iterable[Any]) -> DataRange:
    """Minimum and maximum value of a distribution."""
    values = np.array([ECDFPoint.from_obj(p).value for p in points], dtype=float)
    if values.size == 0:
        raise ValueError("Cannot compute the data range of an empty distribution")
    return DataRange(float(values.min()), float(values.max()))
