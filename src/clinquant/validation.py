"""Upstream validation of binning inputs.

The binning core assumes its inputs are well formed. These checks are meant
to run before it and report every problem at once rather than stopping at
the first: errors make the configuration unusable, warnings flag choices
worth a second look.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence

from .types import (
    ANCHOR_TOLERANCE,
    ClinicalAnchor,
    DataRange,
    ECDFPoint,
    NormalRange,
    TokenBin,
    VariableConfig,
)

MIN_RECOMMENDED_POINTS = 10


@dataclass(frozen=True)
class ValidationMessage:
    field: str
    message: str
    severity: str  # "error" or "warning"


@dataclass
class ValidationReport:
    errors: List[ValidationMessage] = field(default_factory=list)
    warnings: List[ValidationMessage] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def error(self, field_name: str, message: str) -> None:
        self.errors.append(ValidationMessage(field_name, message, "error"))

    def warn(self, field_name: str, message: str) -> None:
        self.warnings.append(ValidationMessage(field_name, message, "warning"))

    def extend(self, other: "ValidationReport") -> "ValidationReport":
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


def validate_distribution(points: Sequence[Any]) -> ValidationReport:
    """Check an ECDF sample for ordering, range and completeness."""
    report = ValidationReport()
    if len(points) == 0:
        report.error("distribution", "No ECDF data provided.")
        return report

    data = [ECDFPoint.from_obj(p) for p in points]
    if len(data) < MIN_RECOMMENDED_POINTS:
        report.warn(
            "distribution",
            f"Only {len(data)} data points. Recommend at least 100 for reliable binning.",
        )

    for i in range(1, len(data)):
        if data[i].cumulative_probability < data[i - 1].cumulative_probability:
            report.error(
                "distribution",
                f"Cumulative probabilities must be monotonically increasing. Issue at index {i}.",
            )
            break

    for i, point in enumerate(data):
        if not 0.0 <= point.cumulative_probability <= 1.0:
            report.error(
                "distribution",
                f"Cumulative probability at index {i} is out of range [0, 1]: "
                f"{point.cumulative_probability}",
            )

    for i in range(1, len(data)):
        if data[i].value < data[i - 1].value:
            report.error(
                "distribution",
                f"Values must be sorted in ascending order. Issue at index {i}.",
            )
            break

    values = [p.value for p in data]
    if len(set(values)) < len(values):
        report.warn(
            "distribution",
            "Duplicate values detected in ECDF data. This may indicate data quality issues.",
        )

    if data[0].cumulative_probability > 0.01:
        report.warn(
            "distribution",
            f"First cumulative probability should be near 0, got {data[0].cumulative_probability:.3f}.",
        )
    if data[-1].cumulative_probability < 0.99:
        report.warn(
            "distribution",
            f"Last cumulative probability should be near 1, got {data[-1].cumulative_probability:.3f}.",
        )
    return report


def validate_normal_range(
    normal_range: Optional[NormalRange],
    data_range: Optional[DataRange] = None,
) -> ValidationReport:
    report = ValidationReport()
    if normal_range is None:
        report.error("normal_range", "Normal range is required.")
        return report

    if normal_range.lower >= normal_range.upper:
        report.error("normal_range", "Normal range lower bound must be less than upper bound.")

    if data_range is not None:
        if normal_range.lower < data_range.min or normal_range.upper > data_range.max:
            report.warn(
                "normal_range",
                f"Normal range [{normal_range.lower}, {normal_range.upper}] extends beyond "
                f"data range [{data_range.min:.2f}, {data_range.max:.2f}].",
            )
        span = normal_range.upper - normal_range.lower
        data_span = data_range.max - data_range.min
        if span > 0.8 * data_span:
            report.warn(
                "normal_range",
                "Normal range covers >80% of data range. This may result in sparse abnormal bins.",
            )
    return report


def validate_anchors(
    anchors: Sequence[ClinicalAnchor],
    normal_range: Optional[NormalRange] = None,
    data_range: Optional[DataRange] = None,
) -> ValidationReport:
    """Duplicate anchor values are errors; the core does not de-duplicate them."""
    report = ValidationReport()
    if len(anchors) == 0:
        report.warn(
            "anchors",
            "No clinical anchors defined. Consider adding evidence-based thresholds.",
        )

    values = [a.value for a in anchors]
    duplicates = sorted({v for i, v in enumerate(values) if v in values[:i]})
    if duplicates:
        report.error(
            "anchors",
            "Duplicate anchor values detected: " + ", ".join(str(v) for v in duplicates),
        )

    for i, anchor in enumerate(anchors):
        if data_range is not None and not data_range.min <= anchor.value <= data_range.max:
            report.warn(
                "anchors",
                f"Anchor at {anchor.value} is outside data range "
                f"[{data_range.min:.2f}, {data_range.max:.2f}]. This bin will have 0% data.",
            )
        if normal_range is not None and (
            abs(anchor.value - normal_range.lower) < ANCHOR_TOLERANCE
            or abs(anchor.value - normal_range.upper) < ANCHOR_TOLERANCE
        ):
            report.warn(
                "anchors",
                f"Anchor at {anchor.value} coincides with normal range boundary. "
                "This may be intentional.",
            )
        if not anchor.evidence.strip():
            report.warn(
                "anchors",
                f"Anchor {i + 1} ({anchor.value}) is missing evidence citation.",
            )
    return report


def validate_configuration(
    config: Any,
    distribution: Optional[Sequence[Any]] = None,
    data_range: Optional[DataRange] = None,
) -> ValidationReport:
    """Validate a whole variable configuration and, optionally, its data."""
    config = VariableConfig.from_obj(config)
    if data_range is not None:
        data_range = DataRange.from_obj(data_range)
    report = ValidationReport()

    if not (config.name or "").strip():
        report.error("name", "Variable name is required.")
    if not (config.unit or "").strip():
        report.warn("unit", "Unit is not specified. Consider adding for clarity.")
    if config.direction is None:
        report.error("direction", "Clinical direction is required.")

    if distribution is not None:
        report.extend(validate_distribution(distribution))
    if config.normal_range is not None:
        report.extend(validate_normal_range(config.normal_range, data_range))
    if config.anchors:
        report.extend(validate_anchors(config.anchors, config.normal_range, data_range))

    for override in config.zone_overrides:
        if override.bin_count <= 0:
            report.error(
                "zone_overrides",
                f"Zone [{override.lower}, {override.upper}] has non-positive bin count {override.bin_count}.",
            )
    return report


def check_bin_sparsity(bins: Iterable[TokenBin], threshold: float = 1.0) -> List[ValidationMessage]:
    """Warn about bins holding less than ``threshold`` percent of the data."""
    messages = []
    for i, b in enumerate(bins):
        if b.data_percentage < threshold:
            messages.append(ValidationMessage(
                "bins",
                f"Bin {i + 1} [{b.lower:.2f}, {b.upper:.2f}] contains only "
                f"{b.data_percentage:.2f}% of data. Consider reducing granularity.",
                "warning",
            ))
    return messages
