"""Value-to-token encoder over an anchor-first bin list.

Maps raw measurements to token indices (or token ids) with the same
interval semantics the bins were generated with: every bin is half-open
``[lower, upper)`` except the last, which is closed.
"""

import bisect
import warnings
from typing import Any, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..binning.anchor_binner import generate_bins, validate_anchor_preservation
from ..types import DataRange, TokenBin, VariableConfig

MISSING_TOKEN = "missing"


class AnchorTokenizer:
    """Maps a measurement to the index of the bin containing it.

    Parameters
    ----------
    bins : sequence of TokenBin
        Contiguous bins sorted by ``lower``, e.g. from
        :func:`~clinquant.binning.generate_bins`.
    config : VariableConfig, optional
        Configuration the bins were generated from, kept for exports.

    Attributes
    ----------
    bins : tuple of TokenBin
        The vocabulary, in token order.
    vocab_size : int
        Number of tokens.
    lowers : np.ndarray
        Lower edge of every bin, shape (vocab_size,).
    upper : float
        Upper edge of the last bin (inclusive).
    """

    def __init__(self, bins: Sequence[TokenBin], config: Optional[VariableConfig] = None):
        if len(bins) == 0:
            raise ValueError("AnchorTokenizer needs at least one bin")
        for prev, nxt in zip(bins[:-1], bins[1:]):
            if prev.upper != nxt.lower:
                raise ValueError(
                    f"Bins are not contiguous: {prev.id} ends at {prev.upper}, "
                    f"{nxt.id} starts at {nxt.lower}"
                )
        self.bins = tuple(bins)
        self.config = config
        self.vocab_size = len(self.bins)
        self.lowers = np.array([b.lower for b in self.bins], dtype=float)
        self.upper = float(self.bins[-1].upper)

    @classmethod
    def fit(cls, variable_config: Any, distribution: Sequence[Any], data_range: Any) -> "AnchorTokenizer":
        """Generate bins for a variable and wrap them in a tokenizer."""
        config = VariableConfig.from_obj(variable_config)
        data_range = DataRange.from_obj(data_range)
        outside = [a for a in config.anchor_values if not data_range.min <= a <= data_range.max]
        if outside:
            warnings.warn(
                f"Anchors {outside} lie outside the data range "
                f"[{data_range.min}, {data_range.max}]; their bins will hold no data.",
                UserWarning,
            )
        return cls(generate_bins(config, distribution, data_range), config=config)

    def _in_range(self, x: float) -> bool:
        return not np.isnan(x) and self.lowers[0] <= x <= self.upper

    def encode_scalar(self, x: float) -> int:
        """Encode a single value to a token index.

        Raises
        ------
        ValueError
            If ``x`` is NaN or outside ``[bins[0].lower, bins[-1].upper]``.
        """
        x = float(x)
        if not self._in_range(x):
            raise ValueError(f"Value {x} outside bin range [{self.lowers[0]}, {self.upper}]")
        return bisect.bisect_right(self.lowers.tolist(), x) - 1

    def encode_batch(self, x: np.ndarray) -> np.ndarray:
        """Encode an array of values; out-of-range and NaN values map to -1."""
        x = np.asarray(x, dtype=float)
        flat = x.flatten()
        tokens = np.searchsorted(self.lowers, flat, side="right") - 1
        invalid = np.isnan(flat) | (flat < self.lowers[0]) | (flat > self.upper)
        tokens[invalid] = -1
        return tokens.reshape(x.shape)

    def token_id(self, tok: int) -> str:
        if not (0 <= tok < self.vocab_size):
            raise ValueError(f"Token {tok} out of range [0, {self.vocab_size})")
        return self.bins[tok].id

    def encode_ids(self, values: Iterable[float]) -> List[str]:
        """Encode values to token ids; NaN becomes ``"missing"``."""
        ids = []
        for v in values:
            if v is None or np.isnan(float(v)):
                ids.append(MISSING_TOKEN)
            else:
                ids.append(self.bins[self.encode_scalar(v)].id)
        return ids

    def decode_scalar(self, tok: int) -> float:
        """Decode a token index to the midpoint of its bin."""
        if not (0 <= tok < self.vocab_size):
            raise ValueError(f"Token {tok} out of range [0, {self.vocab_size})")
        b = self.bins[tok]
        return 0.5 * (b.lower + b.upper)

    def decode_batch(self, tokens: np.ndarray) -> np.ndarray:
        tokens = np.asarray(tokens)
        flat = np.array([self.decode_scalar(int(t)) for t in tokens.flatten()])
        return flat.reshape(tokens.shape)

    def get_bin_edges(self) -> np.ndarray:
        """All bin edges, shape (vocab_size + 1,)."""
        return np.append(self.lowers, self.upper)

    def anchors_preserved(self, anchor_values: Optional[Iterable[float]] = None) -> bool:
        """Re-check anchor preservation, by default against the fitted config."""
        if anchor_values is None:
            anchor_values = self.config.anchor_values if self.config is not None else ()
        return validate_anchor_preservation(self.bins, anchor_values)

    def tokenize_frame(
        self,
        df: pd.DataFrame,
        column: str,
        output_column: Optional[str] = None,
    ) -> pd.DataFrame:
        """Return a copy of ``df`` with a token id column for ``column``."""
        result = df.copy()
        result[output_column or f"{column}_token"] = self.encode_ids(df[column].tolist())
        return result

    def get_vocab_utilization(self, tokens: np.ndarray) -> float:
        """Fraction of the vocabulary present in ``tokens`` (ignoring -1)."""
        tokens = np.asarray(tokens)
        return len(np.unique(tokens[tokens >= 0])) / self.vocab_size

    def __repr__(self) -> str:
        name = self.config.name if self.config is not None else None
        return (f"AnchorTokenizer(name={name!r}, vocab_size={self.vocab_size}, "
                f"range=[{self.lowers[0]}, {self.upper}])")
