"""Machine-readable JSON manifest of a tokenized variable."""

import json
from typing import Any, Dict, Optional, Sequence

from .. import __version__
from ..binning.anchor_binner import validate_anchor_preservation
from ..types import TokenBin, VariableConfig

GENERATOR = "clinquant"


def build_manifest(
    bins: Sequence[TokenBin],
    config: VariableConfig,
    generated_at: Optional[str] = None,
) -> Dict[str, Any]:
    if len(bins) == 0:
        raise ValueError("Cannot build a manifest: no bins provided")
    return {
        "meta": {
            "generated_at": generated_at,
            "generator": GENERATOR,
            "version": __version__,
        },
        "variable": {
            "name": config.name or "",
            "unit": config.unit or "",
            "direction": config.direction.value if config.direction is not None else "",
            "domain": config.domain,
            "normal_range": config.normal_range.to_dict() if config.normal_range else None,
        },
        "clinical_anchors": [a.to_dict() for a in config.anchors],
        "zone_overrides": [z.to_dict() for z in config.zone_overrides],
        "bins": [b.to_dict() for b in bins],
        "statistics": {
            "total_bins": len(bins),
            "total_anchors": len(config.anchors),
            "anchors_preserved": validate_anchor_preservation(bins, config.anchor_values),
            "data_range": {"min": bins[0].lower, "max": bins[-1].upper},
        },
    }


def generate_manifest(
    bins: Sequence[TokenBin],
    config: VariableConfig,
    generated_at: Optional[str] = None,
) -> str:
    """JSON text of :func:`build_manifest`, indented by 2."""
    return json.dumps(build_manifest(bins, config, generated_at), indent=2, ensure_ascii=False)


def load_manifest(text: str):
    """Parse a manifest back into ``(VariableConfig, bins)``."""
    data = json.loads(text)
    variable = dict(data["variable"])
    variable["anchors"] = data.get("clinical_anchors", [])
    variable["zone_overrides"] = data.get("zone_overrides", [])
    config = VariableConfig.from_dict({k: v for k, v in variable.items() if v not in ("", None)})
    bins = [TokenBin.from_dict(b) for b in data["bins"]]
    return config, bins
