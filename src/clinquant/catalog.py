"""Preset clinical variables with evidence-based default anchors.

Each definition carries a typical range, a normal range, default anchors and
a per-zone granularity recommendation. :func:`default_config` turns a
definition into a ready-to-bin :class:`~clinquant.types.VariableConfig`.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .binning.boundaries import collect_boundaries
from .binning.zones import classify_zones
from .types import (
    ClinicalAnchor,
    DataRange,
    Direction,
    NormalRange,
    SeverityGrade,
    VariableConfig,
    ZoneCategory,
    ZoneSpec,
)

DOMAINS = ("respiratory", "medications", "vitals", "labs")


@dataclass(frozen=True)
class Granularity:
    """Recommended bins per zone for normal, below-normal and above-normal zones."""

    normal: int
    low: int
    high: int

    def for_category(self, category: ZoneCategory) -> int:
        if category is ZoneCategory.BELOW:
            return self.low
        if category is ZoneCategory.ABOVE:
            return self.high
        return self.normal


@dataclass(frozen=True)
class VariableDefinition:
    id: str
    name: str
    domain: str
    unit: str
    direction: Direction
    typical_range: DataRange
    normal_range: NormalRange
    default_anchors: Tuple[ClinicalAnchor, ...]
    default_granularity: Granularity
    clinical_rationale: str
    evidence_citation: str


def _anchor(value, label, evidence, grade=None, mortality=None):
    return ClinicalAnchor(
        value=value,
        label=label,
        evidence=evidence,
        severity_grade=SeverityGrade(grade) if grade else None,
        mortality_note=mortality,
    )


_H = Direction.HIGHER_IS_WORSE
_L = Direction.LOWER_IS_WORSE
_B = Direction.BIDIRECTIONAL

_DEFINITIONS = [
    VariableDefinition(
        id="peep_set",
        name="PEEP (Positive End-Expiratory Pressure)",
        domain="respiratory",
        unit="cmH2O",
        direction=_H,
        typical_range=DataRange(0, 30),
        normal_range=NormalRange(0, 5),
        default_anchors=(
            _anchor(8, "Mild - Moderate ARDS initial PEEP",
                    "ARDS Network PEEP/FiO2 table - moderate ARDS starting point", "mild", "20-30%"),
            _anchor(12, "Moderate - Severe ARDS high PEEP strategy",
                    "ALVEOLI Trial - High PEEP for severe ARDS, improved oxygenation", "moderate", "35-45%"),
            _anchor(18, "Severe - Rescue PEEP for refractory hypoxemia",
                    "Approaching limits of safe PEEP, barotrauma risk", "severe", "55-70%"),
            _anchor(24, "Critical - Extreme PEEP, ECMO consideration",
                    "Extreme PEEP indicates refractory ARDS, urgent ECMO evaluation", "critical", ">80%"),
        ),
        default_granularity=Granularity(normal=3, low=2, high=5),
        clinical_rationale="PEEP escalation tracks refractory hypoxemia and rising mortality.",
        evidence_citation="ARDS Network PEEP/FiO2 Table, ALVEOLI Trial (2004), ECMO criteria",
    ),
    VariableDefinition(
        id="tidal_volume_set",
        name="Tidal Volume",
        domain="respiratory",
        unit="mL",
        direction=_B,
        typical_range=DataRange(200, 1000),
        normal_range=NormalRange(400, 600),
        default_anchors=(
            _anchor(300, "Low - Ultra-protective ventilation",
                    "Severe ARDS permissive hypercapnia strategy, <4 mL/kg IBW", "mild", "25-35%"),
            _anchor(250, "Very Low - Extreme lung protection",
                    "Severe ARDS with extreme hypercapnia tolerance, rescue ventilation", "moderate", "40-55%"),
            _anchor(700, "High - Volutrauma concern",
                    "Above ARDS Network target (6-8 mL/kg), increased volutrauma risk", "moderate", "35-50%"),
            _anchor(850, "Very High - Severe volutrauma risk",
                    "Tidal volume >10 mL/kg, high barotrauma risk", "severe", "55-70%"),
        ),
        default_granularity=Granularity(normal=4, low=3, high=3),
        clinical_rationale="Low volumes mark severe ARDS; high volumes increase volutrauma. "
                           "Target 4-8 mL/kg IBW.",
        evidence_citation="ARDS Network Low Tidal Volume Protocol (2000), Permissive Hypercapnia Guidelines",
    ),
    VariableDefinition(
        id="resp_rate_set",
        name="Respiratory Rate (Set)",
        domain="respiratory",
        unit="breaths/min",
        direction=_H,
        typical_range=DataRange(6, 40),
        normal_range=NormalRange(12, 20),
        default_anchors=(
            _anchor(25, "Mild - Tachypnea for minute ventilation",
                    "Compensating for hypoxemia, acidosis, or metabolic demand", "mild", "15-25%"),
            _anchor(30, "Moderate - Severe tachypnea",
                    "Minute ventilation stress, consider sedation or neuromuscular blockade",
                    "moderate", "30-45%"),
            _anchor(35, "Severe - Extreme tachypnea",
                    "Severe dysynchrony or respiratory failure", "severe", "50-65%"),
        ),
        default_granularity=Granularity(normal=4, low=2, high=5),
        clinical_rationale="Higher set rates indicate metabolic stress or ventilator fighting.",
        evidence_citation="ARDS Network Protocol, Surviving Sepsis Campaign 2021",
    ),
    VariableDefinition(
        id="peak_inspiratory_pressure_set",
        name="Peak Inspiratory Pressure",
        domain="respiratory",
        unit="cmH2O",
        direction=_H,
        typical_range=DataRange(10, 50),
        normal_range=NormalRange(15, 25),
        default_anchors=(
            _anchor(30, "Mild - Elevated PIP, airway resistance",
                    "Monitor for barotrauma, secretions, bronchospasm, circuit issues", "mild", "20-30%"),
            _anchor(40, "Moderate - High PIP, severe airway issues",
                    "Risk of pneumothorax, consider bronchoscopy", "moderate", "40-55%"),
            _anchor(45, "Severe - Critical PIP, imminent barotrauma",
                    "Extreme barotrauma risk, assess driving pressure", "severe", ">60%"),
        ),
        default_granularity=Granularity(normal=4, low=2, high=4),
        clinical_rationale="Higher PIP increases pneumothorax risk and mortality.",
        evidence_citation="ARDS Network, Barotrauma Studies",
    ),
    VariableDefinition(
        id="plateau_pressure_set",
        name="Plateau Pressure",
        domain="respiratory",
        unit="cmH2O",
        direction=_H,
        typical_range=DataRange(10, 40),
        normal_range=NormalRange(15, 25),
        default_anchors=(
            _anchor(30, "Moderate - ARDS Network limit",
                    "ARDS Network target: Pplat <30 cmH2O to prevent volutrauma", "moderate", "35-50%"),
            _anchor(35, "Severe - High overdistension risk",
                    "Alveolar overdistension and pneumothorax risk, reduce tidal volume",
                    "severe", "55-70%"),
        ),
        default_granularity=Granularity(normal=4, low=2, high=4),
        clinical_rationale="Pplat >30 cmH2O significantly increases ARDS mortality.",
        evidence_citation="ARDS Network Low Tidal Volume Protocol (2000), VILI Studies",
    ),
    VariableDefinition(
        id="pressure_control_set",
        name="Pressure Control",
        domain="respiratory",
        unit="cmH2O",
        direction=_H,
        typical_range=DataRange(5, 30),
        normal_range=NormalRange(10, 15),
        default_anchors=(
            _anchor(20, "Moderate - High pressure control",
                    "Increased driving pressure, monitor compliance and strain", "moderate", "30-45%"),
            _anchor(25, "Severe - Very high pressure control",
                    "Consider volume control, prone positioning, or ECMO", "severe", "50-65%"),
        ),
        default_granularity=Granularity(normal=4, low=2, high=4),
        clinical_rationale="Escalating pressure control indicates worsening lung compliance.",
        evidence_citation="ARDS Management, Driving Pressure Studies",
    ),
    VariableDefinition(
        id="pressure_support_set",
        name="Pressure Support",
        domain="respiratory",
        unit="cmH2O",
        direction=_H,
        typical_range=DataRange(0, 25),
        normal_range=NormalRange(0, 8),
        default_anchors=(
            _anchor(12, "Moderate - High support, weaning trial",
                    "Patient struggling, may need more time before extubation", "moderate", "20-35%"),
            _anchor(18, "Severe - Weaning failure",
                    "Not ready for extubation, return to controlled ventilation", "severe", "40-60%"),
        ),
        default_granularity=Granularity(normal=4, low=2, high=4),
        clinical_rationale="Higher support indicates muscle weakness or high work of breathing.",
        evidence_citation="Weaning Protocols, Spontaneous Breathing Trials",
    ),
    VariableDefinition(
        id="inspiratory_time_set",
        name="Inspiratory Time",
        domain="respiratory",
        unit="seconds",
        direction=_H,
        typical_range=DataRange(0.5, 2.5),
        normal_range=NormalRange(0.8, 1.2),
        default_anchors=(
            _anchor(1.5, "Moderate - Prolonged I-time for recruitment",
                    "I:E ratio manipulation for alveolar recruitment in ARDS", "moderate", "30-45%"),
            _anchor(2.0, "Severe - Inverse ratio ventilation",
                    "Rescue strategy for severe ARDS (I:E >1:1)", "severe", "50-65%"),
        ),
        default_granularity=Granularity(normal=4, low=2, high=3),
        clinical_rationale="Prolonged inspiratory time is used for recruitment in severe ARDS.",
        evidence_citation="ARDS Ventilation Strategies, Inverse Ratio Ventilation",
    ),
    VariableDefinition(
        id="temp_c",
        name="Temperature",
        domain="vitals",
        unit="°C",
        direction=_B,
        typical_range=DataRange(32, 42),
        normal_range=NormalRange(36.5, 37.5),
        default_anchors=(
            _anchor(35.0, "Hypothermia", "Mild hypothermia, risk of coagulopathy"),
            _anchor(38.3, "Fever (SIRS criterion)", "SIRS/Sepsis-3 fever threshold"),
            _anchor(39.5, "High fever", "Significant fever, consider infection source"),
            _anchor(41.0, "Hyperthermia", "Severe hyperthermia, risk of organ damage"),
        ),
        default_granularity=Granularity(normal=4, low=3, high=4),
        clinical_rationale="Both hypothermia and hyperthermia indicate severity.",
        evidence_citation="Sepsis-3 Definitions (2016), SIRS Criteria",
    ),
    VariableDefinition(
        id="heart_rate",
        name="Heart Rate",
        domain="vitals",
        unit="beats/min",
        direction=_B,
        typical_range=DataRange(30, 200),
        normal_range=NormalRange(60, 100),
        default_anchors=(
            _anchor(50, "Bradycardia", "Hemodynamically significant bradycardia threshold"),
            _anchor(110, "Tachycardia (SIRS)", "SIRS tachycardia criterion"),
            _anchor(130, "Severe tachycardia", "Increased metabolic demand, sepsis, or arrhythmia"),
            _anchor(150, "Extreme tachycardia", "Life-threatening tachyarrhythmia concern"),
        ),
        default_granularity=Granularity(normal=4, low=3, high=5),
        clinical_rationale="Both bradycardia (<50) and tachycardia (>110) indicate severity.",
        evidence_citation="SIRS Criteria, ACLS Guidelines",
    ),
    VariableDefinition(
        id="sbp",
        name="Systolic Blood Pressure",
        domain="vitals",
        unit="mmHg",
        direction=_B,
        typical_range=DataRange(60, 220),
        normal_range=NormalRange(100, 140),
        default_anchors=(
            _anchor(90, "Hypotension", "Classic hypotension threshold, shock concern"),
            _anchor(160, "Stage 2 hypertension", "AHA hypertension guideline threshold"),
            _anchor(180, "Hypertensive urgency", "Risk of end-organ damage"),
        ),
        default_granularity=Granularity(normal=4, low=4, high=4),
        clinical_rationale="Hypotension <90 indicates shock. Hypertension >180 risks stroke/MI.",
        evidence_citation="AHA Hypertension Guidelines (2017), Septic Shock Definition",
    ),
    VariableDefinition(
        id="dbp",
        name="Diastolic Blood Pressure",
        domain="vitals",
        unit="mmHg",
        direction=_B,
        typical_range=DataRange(30, 130),
        normal_range=NormalRange(60, 90),
        default_anchors=(
            _anchor(50, "Low diastolic pressure", "Vasodilatory shock or aortic insufficiency"),
            _anchor(100, "Stage 2 hypertension (diastolic)", "AHA hypertension guideline"),
            _anchor(120, "Hypertensive emergency", "Risk of acute end-organ damage"),
        ),
        default_granularity=Granularity(normal=4, low=3, high=3),
        clinical_rationale="Low DBP (<50) in septic shock. High DBP (>100) indicates hypertension.",
        evidence_citation="AHA Hypertension Guidelines (2017)",
    ),
    VariableDefinition(
        id="map",
        name="Mean Arterial Pressure",
        domain="vitals",
        unit="mmHg",
        direction=_L,
        typical_range=DataRange(40, 150),
        normal_range=NormalRange(65, 110),
        default_anchors=(
            _anchor(65, "Hypotension threshold (Sepsis-3)", "Surviving Sepsis: MAP >=65 mmHg target"),
            _anchor(55, "Severe hypotension", "Tissue hypoperfusion, organ damage risk"),
        ),
        default_granularity=Granularity(normal=4, low=4, high=3),
        clinical_rationale="MAP <65 mmHg is the septic shock threshold and vasopressor criterion.",
        evidence_citation="Surviving Sepsis Campaign 2021, Sepsis-3 (2016)",
    ),
    VariableDefinition(
        id="spo2",
        name="Oxygen Saturation (SpO2)",
        domain="vitals",
        unit="%",
        direction=_L,
        typical_range=DataRange(70, 100),
        normal_range=NormalRange(95, 100),
        default_anchors=(
            _anchor(92, "Hypoxemia", "Supplemental oxygen recommended"),
            _anchor(88, "Moderate hypoxemia", "Consider HFNC or NIPPV"),
            _anchor(85, "Severe hypoxemia", "Risk of organ hypoxia, intubation consideration"),
        ),
        default_granularity=Granularity(normal=3, low=5, high=2),
        clinical_rationale="SpO2 <92% indicates hypoxemia. SpO2 <88% significant respiratory failure.",
        evidence_citation="Oxygen Therapy Guidelines, ARDS Management",
    ),
    VariableDefinition(
        id="respiratory_rate",
        name="Respiratory Rate (Observed)",
        domain="vitals",
        unit="breaths/min",
        direction=_B,
        typical_range=DataRange(6, 50),
        normal_range=NormalRange(12, 20),
        default_anchors=(
            _anchor(8, "Bradypnea", "CNS depression, opiate overdose, or respiratory fatigue"),
            _anchor(22, "Tachypnea (SIRS)", "SIRS criterion for tachypnea"),
            _anchor(30, "Severe tachypnea", "Severe respiratory distress, intubation consideration"),
            _anchor(40, "Extreme tachypnea", "Impending respiratory failure"),
        ),
        default_granularity=Granularity(normal=4, low=3, high=5),
        clinical_rationale="RR >22 is a SIRS criterion. RR >30 indicates severe respiratory distress.",
        evidence_citation="SIRS Criteria, Respiratory Failure Guidelines",
    ),
    VariableDefinition(
        id="pain_scale",
        name="Pain Scale",
        domain="vitals",
        unit="points",
        direction=_H,
        typical_range=DataRange(0, 10),
        normal_range=NormalRange(0, 3),
        default_anchors=(
            _anchor(4, "Moderate pain", "Pain interfering with function, analgesia indicated"),
            _anchor(7, "Severe pain", "Significant distress, aggressive pain management"),
        ),
        default_granularity=Granularity(normal=3, low=2, high=4),
        clinical_rationale="Pain >4 requires intervention. Pain >7 indicates severe distress.",
        evidence_citation="PADIS Guidelines (2018), ICU Pain Assessment",
    ),
    VariableDefinition(
        id="lactate",
        name="Lactate",
        domain="labs",
        unit="mmol/L",
        direction=_H,
        typical_range=DataRange(0.5, 20),
        normal_range=NormalRange(0.5, 2.0),
        default_anchors=(
            _anchor(2.0, "Mild concern - Sepsis threshold",
                    "Surviving Sepsis 2021: Lactate >2 mmol/L indicates tissue hypoperfusion",
                    "mild", "10-15%"),
            _anchor(4.0, "Moderate concern - Severe shock",
                    "Lactate >4 mmol/L: severe shock, significantly increased mortality",
                    "moderate", "30-40%"),
            _anchor(8.0, "Severe - Multi-organ failure risk",
                    "Extreme lactate elevation indicates profound metabolic derangement",
                    "severe", "60-70%"),
            _anchor(15.0, "Critical - Near death level",
                    "Extreme lactate acidosis rarely compatible with survival", "critical", ">90%"),
        ),
        default_granularity=Granularity(normal=4, low=2, high=6),
        clinical_rationale="Each lactate anchor marks a significant step in mortality risk.",
        evidence_citation="Surviving Sepsis Campaign 2021, Sepsis-3 (2016), Lactate-mortality studies",
    ),
    VariableDefinition(
        id="creatinine",
        name="Creatinine",
        domain="labs",
        unit="mg/dL",
        direction=_H,
        typical_range=DataRange(0.5, 10),
        normal_range=NormalRange(0.7, 1.3),
        default_anchors=(
            _anchor(1.5, "Mild - AKI Stage 1 (KDIGO)",
                    "KDIGO: 1.5x baseline or >=0.3 mg/dL increase", "mild", "5-10%"),
            _anchor(2.0, "Moderate - AKI Stage 2 (KDIGO)",
                    "KDIGO: 2x baseline creatinine, increased RRT risk", "moderate", "15-25%"),
            _anchor(3.0, "Severe - AKI Stage 3 (KDIGO)",
                    "KDIGO: 3x baseline or >=4.0 mg/dL, often requires dialysis", "severe", "30-50%"),
            _anchor(6.0, "Critical - Severe renal failure",
                    "Extreme azotemia, urgent RRT, poor prognosis", "critical", ">60%"),
        ),
        default_granularity=Granularity(normal=4, low=2, high=6),
        clinical_rationale="KDIGO staging with mortality graduation.",
        evidence_citation="KDIGO AKI Guidelines (2012), AKI-mortality studies",
    ),
    VariableDefinition(
        id="bilirubin_total",
        name="Total Bilirubin",
        domain="labs",
        unit="mg/dL",
        direction=_H,
        typical_range=DataRange(0.1, 30),
        normal_range=NormalRange(0.1, 1.2),
        default_anchors=(
            _anchor(2.0, "Mild hyperbilirubinemia", "Visible jaundice, liver dysfunction"),
            _anchor(5.0, "Moderate liver dysfunction", "Significant cholestasis or hepatocellular injury"),
            _anchor(10.0, "Severe liver dysfunction", "Acute liver failure consideration"),
        ),
        default_granularity=Granularity(normal=4, low=2, high=5),
        clinical_rationale="Bilirubin >2 indicates liver dysfunction; >10 suggests acute liver failure.",
        evidence_citation="Liver Function Test Interpretation, SOFA Score",
    ),
    VariableDefinition(
        id="albumin",
        name="Albumin",
        domain="labs",
        unit="g/dL",
        direction=_L,
        typical_range=DataRange(1.5, 5.0),
        normal_range=NormalRange(3.5, 5.0),
        default_anchors=(
            _anchor(3.0, "Mild hypoalbuminemia", "Malnutrition or chronic illness"),
            _anchor(2.5, "Moderate hypoalbuminemia", "Significant malnutrition, increased mortality risk"),
            _anchor(2.0, "Severe hypoalbuminemia", "Critical illness, liver failure, or nephrotic syndrome"),
        ),
        default_granularity=Granularity(normal=4, low=5, high=2),
        clinical_rationale="Albumin <3.5 indicates malnutrition or inflammation; <2.5 predicts poor outcomes.",
        evidence_citation="Nutritional Assessment Guidelines, Critical Illness Markers",
    ),
    VariableDefinition(
        id="platelet",
        name="Platelet Count",
        domain="labs",
        unit="x10^9/L",
        direction=_L,
        typical_range=DataRange(10, 450),
        normal_range=NormalRange(150, 400),
        default_anchors=(
            _anchor(100, "Mild thrombocytopenia", "Bleeding risk increases, monitor closely"),
            _anchor(50, "Moderate thrombocytopenia", "Consider transfusion for procedures"),
            _anchor(20, "Severe thrombocytopenia", "High spontaneous bleeding risk"),
        ),
        default_granularity=Granularity(normal=4, low=5, high=2),
        clinical_rationale="Platelets <100 increase bleeding risk; <50 significant, <20 critical.",
        evidence_citation="Transfusion Guidelines, DIC Management",
    ),
    VariableDefinition(
        id="wbc",
        name="White Blood Cell Count",
        domain="labs",
        unit="x10^9/L",
        direction=_B,
        typical_range=DataRange(0.5, 50),
        normal_range=NormalRange(4, 11),
        default_anchors=(
            _anchor(2.0, "Leukopenia", "Immunosuppression or severe infection"),
            _anchor(12, "Leukocytosis (SIRS)", "SIRS criterion: WBC >12 or <4"),
            _anchor(20, "Severe leukocytosis", "Severe infection or leukemia concern"),
        ),
        default_granularity=Granularity(normal=4, low=3, high=4),
        clinical_rationale="WBC >12 or <4 is a SIRS criterion; >20 indicates severe infection.",
        evidence_citation="SIRS Criteria, Sepsis Guidelines",
    ),
    VariableDefinition(
        id="hemoglobin",
        name="Hemoglobin",
        domain="labs",
        unit="g/dL",
        direction=_L,
        typical_range=DataRange(4, 18),
        normal_range=NormalRange(12, 16),
        default_anchors=(
            _anchor(10, "Mild anemia", "Monitor for symptoms, transfusion not typically indicated"),
            _anchor(7, "Moderate anemia - Transfusion threshold", "Restrictive transfusion strategy: Hgb <7 g/dL"),
            _anchor(5, "Severe anemia", "Life-threatening anemia, urgent transfusion"),
        ),
        default_granularity=Granularity(normal=4, low=5, high=2),
        clinical_rationale="Hgb <7 is the restrictive transfusion threshold; <5 is life-threatening.",
        evidence_citation="TRICC Trial (1999), Transfusion Guidelines",
    ),
]

CATALOG: Dict[str, VariableDefinition] = {d.id: d for d in _DEFINITIONS}


def get_variable(variable_id: str) -> VariableDefinition:
    try:
        return CATALOG[variable_id]
    except KeyError:
        raise KeyError(f"Unknown catalog variable: {variable_id!r}") from None


def variables_by_domain(domain: str) -> List[VariableDefinition]:
    if domain not in DOMAINS:
        raise ValueError(f"Unknown domain {domain!r}; expected one of {DOMAINS}")
    return [d for d in _DEFINITIONS if d.domain == domain]


def catalog_stats() -> Dict[str, object]:
    return {
        "total": len(CATALOG),
        "by_domain": {domain: len(variables_by_domain(domain)) for domain in DOMAINS},
    }


def default_config(variable_id: str, data_range: Optional[DataRange] = None) -> VariableConfig:
    """Build the default configuration of a catalog variable.

    Zone overrides carry the definition's granularity for every zone the
    binning will produce over ``data_range`` (the typical range when not
    given), so the resulting config bins exactly as recommended.

    Parameters
    ----------
    variable_id : str
        Catalog id, e.g. ``"lactate"``.
    data_range : DataRange, optional
        Observed range of the data about to be binned.

    Returns
    -------
    VariableConfig
    """
    definition = get_variable(variable_id)
    data_range = DataRange.from_obj(data_range) if data_range is not None else definition.typical_range

    boundaries = collect_boundaries(data_range, definition.normal_range, definition.default_anchors)
    zones = classify_zones(boundaries, definition.normal_range, definition.default_anchors)
    overrides = tuple(
        ZoneSpec(z.lower, z.upper, definition.default_granularity.for_category(z.kind.category))
        for z in zones
    )

    return VariableConfig(
        name=definition.id,
        unit=definition.unit,
        direction=definition.direction,
        normal_range=definition.normal_range,
        anchors=definition.default_anchors,
        zone_overrides=overrides,
        domain=definition.domain,
    )
