"""clinquant: anchor-first tokenization of continuous clinical measurements.

Converts a lab value, vital sign or device setting into a small ordered
vocabulary of tokens whose boundaries include every evidence-based clinical
anchor exactly, with quantile bins filling the space between anchors.
"""

__version__ = "0.1.0"

from .binning.anchor_binner import generate_bins, validate_anchor_preservation
from .exceptions import ConfigurationError
from .tokenizers.anchor_tokenizer import AnchorTokenizer
from .types import (
    ClinicalAnchor,
    DataRange,
    Direction,
    ECDFPoint,
    NormalRange,
    TokenBin,
    VariableConfig,
    ZoneSpec,
)

__all__ = [
    "generate_bins",
    "validate_anchor_preservation",
    "ConfigurationError",
    "AnchorTokenizer",
    "ClinicalAnchor",
    "DataRange",
    "Direction",
    "ECDFPoint",
    "NormalRange",
    "TokenBin",
    "VariableConfig",
    "ZoneSpec",
]
