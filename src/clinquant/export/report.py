"""Human-readable Markdown documentation of a tokenized variable."""

from typing import List, Optional, Sequence

from ..binning.anchor_binner import validate_anchor_preservation
from ..binning.labels import sanitize_name
from ..types import ANCHOR_TOLERANCE, TokenBin, VariableConfig, ZoneCategory


def _zone_summary(bins: Sequence[TokenBin], unit: str) -> str:
    sections = []
    for category in (ZoneCategory.BELOW, ZoneCategory.NORMAL, ZoneCategory.ABOVE):
        zone_bins = [b for b in bins if b.zone_category is category]
        if not zone_bins:
            continue
        coverage = sum(b.data_percentage for b in zone_bins)
        sections.append(
            f"#### {category.value.capitalize()} Zone\n\n"
            f"- **Bin Count:** {len(zone_bins)}\n"
            f"- **Range:** {zone_bins[0].lower:.2f} - {zone_bins[-1].upper:.2f} {unit}\n"
            f"- **Data Coverage:** {coverage:.1f}%\n"
        )
    return "\n".join(sections)


def _is_anchor_edge(b: TokenBin, anchor_values: Sequence[float]) -> bool:
    return any(
        abs(a - b.lower) < ANCHOR_TOLERANCE or abs(a - b.upper) < ANCHOR_TOLERANCE
        for a in anchor_values
    )


def generate_report(
    bins: Sequence[TokenBin],
    config: VariableConfig,
    generated_at: Optional[str] = None,
) -> str:
    """Render Markdown documentation: ranges, anchors, bins and checks."""
    if len(bins) == 0:
        raise ValueError("Cannot generate a report: no bins provided")

    name = config.name or "variable"
    unit = config.unit or ""
    direction = config.direction.value.replace("_", " ") if config.direction else "not specified"
    anchor_values = list(config.anchor_values)

    out: List[str] = [f"# Clinical Tokenization Documentation: {name}", ""]
    if generated_at:
        out.append(f"**Generated:** {generated_at}  ")
    out += [
        f"**Variable:** {name}  ",
        f"**Unit:** {unit or 'dimensionless'}  ",
        f"**Clinical Direction:** {direction}  ",
        "",
        "---",
        "",
        "## Normal Range",
        "",
    ]
    if config.normal_range is not None:
        out += [
            f"- **Lower Bound:** {config.normal_range.lower} {unit}",
            f"- **Upper Bound:** {config.normal_range.upper} {unit}",
        ]
    else:
        out.append("*No normal range defined*")

    out += ["", "---", "", "## Clinical Anchors (Preserved Thresholds)", "",
            "These thresholds are exact bin boundaries.", ""]
    if config.anchors:
        for i, anchor in enumerate(config.anchors, start=1):
            out += [
                f"### {i}. {anchor.label or anchor.value}",
                "",
                f"- **Threshold Value:** {anchor.value} {unit}",
                f"- **Evidence:** {anchor.evidence or 'not cited'}",
            ]
            if anchor.rationale:
                out.append(f"- **Clinical Rationale:** {anchor.rationale}")
            if anchor.severity_grade is not None:
                out.append(f"- **Severity Grade:** {anchor.severity_grade.value}")
            if anchor.mortality_note:
                out.append(f"- **Mortality:** {anchor.mortality_note}")
            out.append("")
    else:
        out += ["*No clinical anchors defined*", ""]

    out += [
        "---",
        "",
        "## Bin Definitions",
        "",
        f"Total bins: {len(bins)}",
        "",
        "### By Zone",
        "",
        _zone_summary(bins, unit),
        "### Complete Bin Table",
        "",
        "| Bin ID | Lower | Upper | Data % | Zone | Severity | Clinical Notes |",
        "|--------|-------|-------|--------|------|----------|----------------|",
    ]
    for b in bins:
        note = "Anchor boundary" if _is_anchor_edge(b, anchor_values) else ""
        out.append(
            f"| `{b.id}` | {b.lower:.2f} | {b.upper:.2f} | {b.data_percentage:.1f}% "
            f"| {b.zone_category.value} | {b.severity.value} | {note} |"
        )

    preserved = validate_anchor_preservation(bins, anchor_values)
    total = sum(b.data_percentage for b in bins)
    out += [
        "",
        "---",
        "",
        "## Usage",
        "",
        f"- Apply `tokenize_{sanitize_name(config.name)}` from the generated Python module.",
        "- Each bin is one token; bins are ordered by value.",
        "- Data percentages indicate class balance.",
        "",
        "## Validation",
        "",
        f"- **Anchor Preservation:** {'passed' if preserved else 'FAILED'} "
        f"({len(anchor_values)} anchor(s))",
        f"- **Coverage:** {bins[0].lower:.2f} to {bins[-1].upper:.2f} {unit}",
        f"- **Data Accounted:** {total:.1f}%",
        f"- **Completeness:** {len(bins)} bins generated",
        "",
    ]
    return "\n".join(out)
