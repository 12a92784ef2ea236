"""HDF5 persistence of bin lists.

Each variable is stored in its own group: numeric edges and percentages as
float datasets, ids and labels as string datasets, and the configuration as
a JSON attribute. A loaded bin list can be re-checked with
:func:`~clinquant.binning.validate_anchor_preservation` without rerunning
the binning.
"""

import json
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..types import Severity, TokenBin, VariableConfig, ZoneCategory


def save_bins_to_hdf5(
    bins: Sequence[TokenBin],
    filepath: str,
    group_name: str = "bins",
    config: Optional[VariableConfig] = None,
) -> None:
    """Save a bin list (and optionally its configuration) to an HDF5 group.

    Parameters
    ----------
    bins : sequence of TokenBin
        Bins to save.
    filepath : str
        Path to HDF5 file; opened in append mode.
    group_name : str
        Group name within the file; an existing group is replaced.
    config : VariableConfig, optional
        Configuration stored alongside, with its anchor values.
    """
    try:
        import h5py
    except ImportError:
        raise ImportError("h5py package required for HDF5 I/O")

    str_dtype = h5py.string_dtype(encoding="utf-8")
    with h5py.File(filepath, "a") as f:
        if group_name in f:
            del f[group_name]
        group = f.create_group(group_name)

        group.attrs["n_bins"] = len(bins)
        group.create_dataset("ids", data=[b.id for b in bins], dtype=str_dtype)
        group.create_dataset("lower", data=np.array([b.lower for b in bins], dtype=float))
        group.create_dataset("upper", data=np.array([b.upper for b in bins], dtype=float))
        group.create_dataset(
            "data_percentage", data=np.array([b.data_percentage for b in bins], dtype=float)
        )
        group.create_dataset("severity", data=[b.severity.value for b in bins], dtype=str_dtype)
        group.create_dataset(
            "zone_category", data=[b.zone_category.value for b in bins], dtype=str_dtype
        )

        if config is not None:
            group.attrs["config"] = json.dumps(config.to_dict())
            group.create_dataset(
                "anchor_values", data=np.array(config.anchor_values, dtype=float)
            )


def _as_str(value) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else str(value)


def load_bins_from_hdf5(
    filepath: str,
    group_name: str = "bins",
) -> Tuple[List[TokenBin], Optional[VariableConfig]]:
    """Load a bin list saved with :func:`save_bins_to_hdf5`.

    Returns
    -------
    tuple
        ``(bins, config)``; ``config`` is None when none was stored.

    Raises
    ------
    KeyError
        If the group does not exist.
    """
    try:
        import h5py
    except ImportError:
        raise ImportError("h5py package required for HDF5 I/O")

    with h5py.File(filepath, "r") as f:
        if group_name not in f:
            raise KeyError(f"Group '{group_name}' not found in HDF5 file")
        group = f[group_name]

        ids = [_as_str(v) for v in group["ids"][...]]
        lower = group["lower"][...]
        upper = group["upper"][...]
        pct = group["data_percentage"][...]
        severity = [_as_str(v) for v in group["severity"][...]]
        zone = [_as_str(v) for v in group["zone_category"][...]]

        bins = [
            TokenBin(
                id=ids[i],
                lower=float(lower[i]),
                upper=float(upper[i]),
                data_percentage=float(pct[i]),
                severity=Severity(severity[i]),
                zone_category=ZoneCategory(zone[i]),
            )
            for i in range(len(ids))
        ]

        config = None
        if "config" in group.attrs:
            config = VariableConfig.from_dict(json.loads(_as_str(group.attrs["config"])))

    return bins, config
