"""Collection of the fixed cut points every bin list must honour."""

from typing import Iterable, List, Optional

from ..types import ClinicalAnchor, DataRange, NormalRange


def collect_boundaries(
    data_range: DataRange,
    normal_range: Optional[NormalRange] = None,
    anchors: Iterable[ClinicalAnchor] = (),
) -> List[float]:
    """Gather data extremes, normal-range edges and anchors as zone edges.

    Only exactly equal values are merged; an anchor sitting on a normal
    range edge becomes a single boundary. Values within the anchor
    tolerance of each other stay distinct.

    Parameters
    ----------
    data_range : DataRange
        Observed minimum and maximum.
    normal_range : NormalRange, optional
        Reference interval; both edges become boundaries.
    anchors : iterable of ClinicalAnchor
        Clinical thresholds; every value becomes a boundary.

    Returns
    -------
    list of float
        Strictly increasing boundary values. Without anchors and normal
        range this is ``[min, max]``.
    """
    values = [float(data_range.min), float(data_range.max)]
    if normal_range is not None:
        values.extend([float(normal_range.lower), float(normal_range.upper)])
    values.extend(float(a.value) for a in anchors)
    return sorted(set(values))
