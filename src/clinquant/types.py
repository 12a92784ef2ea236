"""Data model for anchor-first clinical tokenization.

All records are frozen dataclasses. Each one converts to and from plain
dictionaries so configurations and bin lists can travel through YAML, JSON
and HDF5 attributes unchanged.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

# Tolerance for matching zone overrides and checking anchor edges.
ANCHOR_TOLERANCE = 1e-3


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


class Direction(str, Enum):
    """Which extreme of a variable denotes a worsening condition."""

    HIGHER_IS_WORSE = "higher_is_worse"
    LOWER_IS_WORSE = "lower_is_worse"
    BIDIRECTIONAL = "bidirectional"

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        aliases = {
            "higher_worse": cls.HIGHER_IS_WORSE,
            "lower_worse": cls.LOWER_IS_WORSE,
        }
        if key in aliases:
            return aliases[key]
        for member in cls:
            if member.value == key:
                return member
        return None


class ZoneCategory(str, Enum):
    BELOW = "below"
    NORMAL = "normal"
    ABOVE = "above"


class ZoneKind(str, Enum):
    """Semantic position of a zone relative to the normal range."""

    BELOW = "below"
    NORMAL = "normal"
    ABOVE_MILD = "above_mild"
    ABOVE_MODERATE = "above_moderate"
    ABOVE_SEVERE = "above_severe"

    @property
    def category(self) -> ZoneCategory:
        if self is ZoneKind.NORMAL:
            return ZoneCategory.NORMAL
        if self is ZoneKind.BELOW:
            return ZoneCategory.BELOW
        return ZoneCategory.ABOVE


class Severity(str, Enum):
    NORMAL = "normal"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    CRITICAL = "critical"


class SeverityGrade(str, Enum):
    """Graduated severity attached to an anchor by the clinician."""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    CRITICAL = "critical"
    EXTREME = "extreme"


@dataclass(frozen=True)
class ECDFPoint:
    """One (value, cumulative probability) sample of an empirical CDF."""

    value: float
    cumulative_probability: float

    @classmethod
    def from_obj(cls, obj: Any) -> "ECDFPoint":
        """Build a point from an ``ECDFPoint``, a mapping or a pair."""
        if isinstance(obj, ECDFPoint):
            return obj
        if isinstance(obj, Mapping):
            return cls(
                float(obj["value"]),
                float(_pick(obj, "cumulative_probability", "cumulativeProbability")),
            )
        value, prob = obj
        return cls(float(value), float(prob))

    def to_dict(self) -> Dict[str, float]:
        return {"value": self.value, "cumulative_probability": self.cumulative_probability}


@dataclass(frozen=True)
class DataRange:
    """Observed minimum and maximum of a variable."""

    min: float
    max: float

    @classmethod
    def from_obj(cls, obj: Any) -> "DataRange":
        if isinstance(obj, DataRange):
            return obj
        if isinstance(obj, Mapping):
            return cls(float(obj["min"]), float(obj["max"]))
        lo, hi = obj
        return cls(float(lo), float(hi))

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class NormalRange:
    """Reference interval considered clinically unremarkable.

    The constructor does not check ``lower < upper``; binning raises
    :class:`~clinquant.exceptions.ConfigurationError` for a malformed range
    and :func:`clinquant.validation.validate_normal_range` reports it.
    """

    lower: float
    upper: float

    @classmethod
    def from_obj(cls, obj: Any) -> "NormalRange":
        if isinstance(obj, NormalRange):
            return obj
        if isinstance(obj, Mapping):
            return cls(float(obj["lower"]), float(obj["upper"]))
        lo, hi = obj
        return cls(float(lo), float(hi))

    def to_dict(self) -> Dict[str, float]:
        return {"lower": self.lower, "upper": self.upper}


@dataclass(frozen=True)
class ClinicalAnchor:
    """Evidence-based threshold that must become an exact bin edge.

    Parameters
    ----------
    value : float
        Threshold value in the variable's unit.
    label : str
        Short clinical label, e.g. ``"Sepsis threshold"``.
    evidence : str
        Citation or guideline backing the threshold.
    rationale : str, optional
        Free-text clinical rationale.
    severity_grade : SeverityGrade, optional
        Clinician-assigned grade of the threshold.
    mortality_note : str, optional
        Associated mortality figure, e.g. ``"30-40%"``.
    """

    value: float
    label: str = ""
    evidence: str = ""
    rationale: Optional[str] = None
    severity_grade: Optional[SeverityGrade] = None
    mortality_note: Optional[str] = None

    @classmethod
    def from_obj(cls, obj: Any) -> "ClinicalAnchor":
        if isinstance(obj, ClinicalAnchor):
            return obj
        if not isinstance(obj, Mapping):
            return cls(float(obj))
        grade = _pick(obj, "severity_grade", "severity")
        return cls(
            value=float(obj["value"]),
            label=obj.get("label", "") or "",
            evidence=obj.get("evidence", "") or "",
            rationale=obj.get("rationale"),
            severity_grade=SeverityGrade(grade) if grade else None,
            mortality_note=_pick(obj, "mortality_note", "mortality"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "value": self.value,
            "label": self.label,
            "evidence": self.evidence,
        }
        if self.rationale is not None:
            data["rationale"] = self.rationale
        if self.severity_grade is not None:
            data["severity_grade"] = self.severity_grade.value
        if self.mortality_note is not None:
            data["mortality_note"] = self.mortality_note
        return data


@dataclass(frozen=True)
class ZoneSpec:
    """Caller override of the bin count of one zone."""

    lower: float
    upper: float
    bin_count: int

    @classmethod
    def from_obj(cls, obj: Any) -> "ZoneSpec":
        if isinstance(obj, ZoneSpec):
            return obj
        if isinstance(obj, Mapping):
            return cls(
                float(obj["lower"]),
                float(obj["upper"]),
                int(_pick(obj, "bin_count", "bins")),
            )
        lo, hi, count = obj
        return cls(float(lo), float(hi), int(count))

    def matches(self, lower: float, upper: float) -> bool:
        return (abs(self.lower - lower) < ANCHOR_TOLERANCE
                and abs(self.upper - upper) < ANCHOR_TOLERANCE)

    def to_dict(self) -> Dict[str, Any]:
        return {"lower": self.lower, "upper": self.upper, "bin_count": self.bin_count}


@dataclass(frozen=True)
class VariableConfig:
    """Everything the binning needs to know about one variable.

    Every field is optional: a bare ``VariableConfig()`` bins the whole
    range as a single ``normal`` zone.
    """

    name: Optional[str] = None
    unit: Optional[str] = None
    direction: Optional[Direction] = None
    normal_range: Optional[NormalRange] = None
    anchors: Tuple[ClinicalAnchor, ...] = ()
    zone_overrides: Tuple[ZoneSpec, ...] = ()
    domain: Optional[str] = None

    @property
    def anchor_values(self) -> Tuple[float, ...]:
        return tuple(a.value for a in self.anchors)

    @property
    def resolved_direction(self) -> Direction:
        return self.direction if self.direction is not None else Direction.HIGHER_IS_WORSE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VariableConfig":
        """Parse a plain mapping; camelCase keys are accepted as well."""
        direction = data.get("direction")
        normal_range = _pick(data, "normal_range", "normalRange")
        anchors = data.get("anchors") or ()
        overrides = _pick(data, "zone_overrides", "zoneConfigs", "zone_configs") or ()
        return cls(
            name=data.get("name"),
            unit=data.get("unit"),
            direction=Direction(direction) if direction else None,
            normal_range=NormalRange.from_obj(normal_range) if normal_range is not None else None,
            anchors=tuple(ClinicalAnchor.from_obj(a) for a in anchors),
            zone_overrides=tuple(ZoneSpec.from_obj(z) for z in overrides),
            domain=data.get("domain"),
        )

    @classmethod
    def from_obj(cls, obj: Any) -> "VariableConfig":
        if obj is None:
            return cls()
        if isinstance(obj, VariableConfig):
            return obj
        return cls.from_dict(obj)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "unit": self.unit,
            "direction": self.direction.value if self.direction is not None else None,
            "normal_range": self.normal_range.to_dict() if self.normal_range else None,
            "anchors": [a.to_dict() for a in self.anchors],
            "zone_overrides": [z.to_dict() for z in self.zone_overrides],
            "domain": self.domain,
        }


@dataclass(frozen=True)
class Zone:
    """Contiguous sub-range with one classification and one bin count."""

    lower: float
    upper: float
    kind: ZoneKind
    bin_count: int


@dataclass(frozen=True)
class TokenBin:
    """One token of the output vocabulary.

    A bin covers ``[lower, upper)``; the last bin of a variable also
    includes ``upper``.
    """

    id: str
    lower: float
    upper: float
    data_percentage: float
    severity: Severity
    zone_category: ZoneCategory

    def contains(self, x: float, closed: bool = False) -> bool:
        if closed:
            return self.lower <= x <= self.upper
        return self.lower <= x < self.upper

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TokenBin":
        return cls(
            id=str(data["id"]),
            lower=float(_pick(data, "lower", "lower_bound")),
            upper=float(_pick(data, "upper", "upper_bound")),
            data_percentage=float(_pick(data, "data_percentage", "dataPercentage", default=0.0)),
            severity=Severity(data["severity"]),
            zone_category=ZoneCategory(_pick(data, "zone_category", "zone")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lower": self.lower,
            "upper": self.upper,
            "data_percentage": self.data_percentage,
            "severity": self.severity.value,
            "zone_category": self.zone_category.value,
        }
