"""Identifiers and severity labels for finished bins."""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from ..types import Direction, Severity, TokenBin, Zone, ZoneKind
from .intra_zone import SubBin

_D = Direction
_K = ZoneKind
_S = Severity

SEVERITY_TABLE: Dict[Tuple[ZoneKind, Direction], Severity] = {
    (_K.NORMAL, _D.HIGHER_IS_WORSE): _S.NORMAL,
    (_K.NORMAL, _D.LOWER_IS_WORSE): _S.NORMAL,
    (_K.NORMAL, _D.BIDIRECTIONAL): _S.NORMAL,
    (_K.BELOW, _D.HIGHER_IS_WORSE): _S.MILD,
    (_K.BELOW, _D.LOWER_IS_WORSE): _S.MODERATE,
    (_K.BELOW, _D.BIDIRECTIONAL): _S.MODERATE,
    (_K.ABOVE_MILD, _D.HIGHER_IS_WORSE): _S.MILD,
    (_K.ABOVE_MILD, _D.LOWER_IS_WORSE): _S.NORMAL,
    (_K.ABOVE_MILD, _D.BIDIRECTIONAL): _S.MILD,
    (_K.ABOVE_MODERATE, _D.HIGHER_IS_WORSE): _S.MODERATE,
    (_K.ABOVE_MODERATE, _D.LOWER_IS_WORSE): _S.MILD,
    (_K.ABOVE_MODERATE, _D.BIDIRECTIONAL): _S.MODERATE,
    (_K.ABOVE_SEVERE, _D.HIGHER_IS_WORSE): _S.SEVERE,
    (_K.ABOVE_SEVERE, _D.LOWER_IS_WORSE): _S.MODERATE,
    (_K.ABOVE_SEVERE, _D.BIDIRECTIONAL): _S.SEVERE,
}


def severity_for(kind: ZoneKind, direction: Optional[Direction] = None) -> Severity:
    """Look up the severity of a zone kind; no direction means higher-is-worse."""
    if direction is None:
        direction = Direction.HIGHER_IS_WORSE
    return SEVERITY_TABLE[(ZoneKind(kind), Direction(direction))]


def sanitize_name(name: Optional[str]) -> str:
    """Lower-case identifier made of letters, digits and underscores."""
    cleaned = re.sub(r"[^a-zA-Z0-9_]", "_", (name or "").strip())
    if not cleaned:
        return "variable"
    if cleaned[0].isdigit():
        cleaned = "_" + cleaned
    return cleaned.lower()


def format_edge(value: float) -> str:
    """Render a bin edge for an identifier: ``2.0 -> 2p0``, ``-0.25 -> m0p25``."""
    text = f"{abs(value):.4f}".rstrip("0")
    if text.endswith("."):
        text += "0"
    text = text.replace(".", "p")
    return ("m" + text) if value < 0 else text


def make_bin_id(name: Optional[str], kind: ZoneKind, lower: float, upper: float) -> str:
    return f"{sanitize_name(name)}_{kind.value}_{format_edge(lower)}_to_{format_edge(upper)}"


def label_bins(
    zoned: Sequence[Tuple[Zone, Sequence[SubBin]]],
    name: Optional[str] = None,
    direction: Optional[Direction] = None,
) -> List[TokenBin]:
    """Turn per-zone sub-bins into ``TokenBin`` records.

    Identical rendered ids, which occur when quantile cuts coincide, get a
    ``_2``, ``_3``, ... suffix in order of appearance.
    """
    bins = []
    seen: Dict[str, int] = {}
    for zone, sub_bins in zoned:
        severity = severity_for(zone.kind, direction)
        for sub in sub_bins:
            bin_id = make_bin_id(name, zone.kind, sub.lower, sub.upper)
            if bin_id in seen:
                seen[bin_id] += 1
                bin_id = f"{bin_id}_{seen[bin_id]}"
            else:
                seen[bin_id] = 1
            bins.append(TokenBin(
                id=bin_id,
                lower=float(sub.lower),
                upper=float(sub.upper),
                data_percentage=round(float(sub.data_percentage), 2),
                severity=severity,
                zone_category=zone.kind.category,
            ))
    return bins
