"""Tabular dump of bin definitions."""

from typing import Sequence

import pandas as pd

from ..types import TokenBin, VariableConfig

COLUMNS = [
    "bin_id",
    "lower_bound",
    "upper_bound",
    "data_percentage",
    "zone",
    "severity",
    "variable",
    "unit",
]


def bins_to_frame(bins: Sequence[TokenBin], config: VariableConfig) -> pd.DataFrame:
    """One row per bin, in bin order."""
    rows = [
        {
            "bin_id": b.id,
            "lower_bound": b.lower,
            "upper_bound": b.upper,
            "data_percentage": b.data_percentage,
            "zone": b.zone_category.value,
            "severity": b.severity.value,
            "variable": config.name or "",
            "unit": config.unit or "",
        }
        for b in bins
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def to_csv(bins: Sequence[TokenBin], config: VariableConfig) -> str:
    """CSV text with bounds at 4 decimals and percentages at 2."""
    frame = bins_to_frame(bins, config)
    frame["lower_bound"] = frame["lower_bound"].map(lambda v: f"{v:.4f}")
    frame["upper_bound"] = frame["upper_bound"].map(lambda v: f"{v:.4f}")
    frame["data_percentage"] = frame["data_percentage"].map(lambda v: f"{v:.2f}")
    return frame.to_csv(index=False, lineterminator="\n")
