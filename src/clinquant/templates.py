"""Guideline-based disease templates.

A template bundles the variables of one clinical panel, each a complete
:class:`~clinquant.types.VariableConfig` with anchors and per-zone bin counts,
so a whole panel can be binned and exported in one pass.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .types import ClinicalAnchor, Direction, NormalRange, VariableConfig, ZoneSpec


@dataclass(frozen=True)
class DiseaseTemplate:
    id: str
    name: str
    description: str
    guideline: str
    variables: Tuple[VariableConfig, ...]

    def get_variable(self, name: str) -> VariableConfig:
        for variable in self.variables:
            if variable.name == name:
                return variable
        raise KeyError(f"Template {self.id!r} has no variable {name!r}")


def _anchor(value, label, evidence, rationale=None):
    return ClinicalAnchor(value=value, label=label, evidence=evidence, rationale=rationale)


def _variable(name, unit, direction, normal, anchors, zones, domain):
    return VariableConfig(
        name=name,
        unit=unit,
        direction=direction,
        normal_range=NormalRange(*normal),
        anchors=tuple(anchors),
        zone_overrides=tuple(ZoneSpec(*z) for z in zones),
        domain=domain,
    )


_H = Direction.HIGHER_IS_WORSE
_L = Direction.LOWER_IS_WORSE
_B = Direction.BIDIRECTIONAL

_TEMPLATES = [
    DiseaseTemplate(
        id="sepsis",
        name="Sepsis Panel",
        description="Based on Surviving Sepsis Campaign 2021",
        guideline="Surviving Sepsis Campaign 2021",
        variables=(
            _variable(
                "lactate", "mmol/L", _H, (0.5, 2.0),
                [
                    _anchor(2.0, "Sepsis threshold", "Surviving Sepsis Campaign 2021",
                            "Initiates sepsis bundle and close monitoring"),
                    _anchor(4.0, "Severe sepsis", "Surviving Sepsis Campaign 2021",
                            "Indicates severe tissue hypoxia, aggressive resuscitation needed"),
                ],
                [(0, 0.5, 3), (0.5, 2.0, 5), (2.0, 4.0, 5), (4.0, 30, 3)],
                "labs",
            ),
            _variable(
                "mean_arterial_pressure", "mmHg", _L, (70, 100),
                [
                    _anchor(65, "Hypotension threshold", "Surviving Sepsis Campaign 2021",
                            "MAP <65 associated with end-organ hypoperfusion"),
                ],
                [(40, 65, 5), (65, 100, 5), (100, 140, 3)],
                "vitals",
            ),
        ),
    ),
    DiseaseTemplate(
        id="aki",
        name="Acute Kidney Injury (KDIGO)",
        description="Based on KDIGO Clinical Practice Guidelines 2012",
        guideline="KDIGO 2012",
        variables=(
            _variable(
                "creatinine", "mg/dL", _H, (0.7, 1.3),
                [
                    _anchor(1.5, "KDIGO Stage 1", "KDIGO 2012"),
                    _anchor(2.0, "KDIGO Stage 2", "KDIGO 2012"),
                    _anchor(3.0, "KDIGO Stage 3", "KDIGO 2012"),
                ],
                [(0.3, 0.7, 3), (0.7, 1.3, 5), (1.3, 1.5, 3), (1.5, 2.0, 3), (2.0, 10, 5)],
                "labs",
            ),
        ),
    ),
    DiseaseTemplate(
        id="ards",
        name="ARDS (Berlin Definition)",
        description="Based on Berlin Definition 2012",
        guideline="Berlin Definition 2012",
        variables=(
            _variable(
                "pf_ratio", "mmHg", _L, (400, 500),
                [
                    _anchor(300, "Mild ARDS", "Berlin Definition 2012"),
                    _anchor(200, "Moderate ARDS", "Berlin Definition 2012"),
                    _anchor(100, "Severe ARDS", "Berlin Definition 2012"),
                ],
                [(50, 100, 3), (100, 200, 5), (200, 300, 5), (300, 500, 5)],
                "labs",
            ),
            _variable(
                "plateau_pressure", "cmH2O", _H, (15, 25),
                [
                    _anchor(30, "ARDS Net upper limit", "ARDS Network 2000",
                            "Plateau pressure >30 associated with volutrauma"),
                ],
                [(10, 15, 3), (15, 25, 5), (25, 30, 3), (30, 45, 3)],
                "respiratory",
            ),
        ),
    ),
    DiseaseTemplate(
        id="vasopressors",
        name="Vasopressor Panel",
        description="Continuous infusion medications for hemodynamic support",
        guideline="SSC 2021 & AHA/ACC Guidelines",
        variables=(
            _variable(
                "norepinephrine", "mcg/min", _H, (0, 5),
                [
                    _anchor(10, "Low dose threshold", "SSC 2021",
                            "Doses >10 mcg/min indicate moderate shock"),
                    _anchor(20, "High dose threshold", "SSC 2021",
                            "Doses >20 mcg/min indicate severe/refractory shock"),
                ],
                [(0, 5, 5), (5, 10, 5), (10, 20, 5), (20, 100, 3)],
                "medications",
            ),
            _variable(
                "epinephrine", "mcg/min", _H, (0, 5),
                [
                    _anchor(5, "Low-dose threshold", "Surviving Sepsis Campaign 2021",
                            "Low-dose epinephrine for refractory shock"),
                    _anchor(10, "Moderate-dose", "Surviving Sepsis Campaign 2021",
                            "Moderate-dose epinephrine indicates severe shock"),
                    _anchor(20, "High-dose, refractory shock", "Surviving Sepsis Campaign 2021",
                            "High-dose epinephrine for refractory shock, consider other therapies"),
                ],
                [(0, 5, 5), (5, 10, 5), (10, 20, 5), (20, 100, 3)],
                "medications",
            ),
            _variable(
                "phenylephrine", "mcg/min", _H, (0, 50),
                [
                    _anchor(50, "Low-dose threshold", "SSC 2021",
                            "Low-dose phenylephrine for mild hypotension"),
                    _anchor(100, "Moderate-dose", "SSC 2021",
                            "Moderate-dose phenylephrine for persistent hypotension"),
                    _anchor(200, "High-dose", "SSC 2021",
                            "High-dose phenylephrine, consider alternative vasopressors"),
                ],
                [(0, 50, 5), (50, 100, 5), (100, 200, 5), (200, 400, 3)],
                "medications",
            ),
            _variable(
                "vasopressin", "units/min", _H, (0, 0.03),
                [
                    _anchor(0.03, "Standard dose", "SSC 2021",
                            "Fixed dose vasopressin for septic shock"),
                    _anchor(0.04, "High dose threshold", "Clinical practice",
                            "Above guideline-recommended dose"),
                ],
                [(0, 0.01, 3), (0.01, 0.03, 5), (0.03, 0.1, 5)],
                "medications",
            ),
        ),
    ),
    DiseaseTemplate(
        id="mechanical_ventilation",
        name="Mechanical Ventilation Parameters",
        description="Key ventilator settings from respiratory_support table",
        guideline="ARDS Network & Lung Protective Ventilation",
        variables=(
            _variable(
                "peep_set", "cmH2O", _B, (5, 10),
                [
                    _anchor(10, "Moderate PEEP threshold", "ARDS Network",
                            "PEEP >10 indicates moderate-severe ARDS"),
                    _anchor(15, "High PEEP threshold", "ARDS Network",
                            "High PEEP strategy for severe ARDS"),
                ],
                [(0, 5, 3), (5, 10, 5), (10, 15, 5), (15, 25, 3)],
                "respiratory",
            ),
            _variable(
                "plateau_pressure_obs", "cmH2O", _H, (15, 25),
                [
                    _anchor(30, "ARDS Net upper limit", "ARDS Network 2000",
                            "Plateau pressure >30 associated with volutrauma"),
                    _anchor(35, "Severe overdistention", "Lung protective ventilation literature",
                            "Very high risk of ventilator-induced lung injury"),
                ],
                [(10, 15, 3), (15, 25, 5), (25, 30, 5), (30, 35, 3), (35, 50, 3)],
                "respiratory",
            ),
            _variable(
                "fio2_set", "fraction (0-1)", _H, (0.21, 0.40),
                [
                    _anchor(0.40, "Supplemental oxygen threshold", "Clinical practice",
                            "FiO2 >0.4 indicates hypoxemic respiratory failure"),
                    _anchor(0.60, "High oxygen requirement", "ARDS criteria",
                            "High FiO2 requirement indicates severe hypoxemia"),
                ],
                [(0.21, 0.40, 5), (0.40, 0.60, 5), (0.60, 0.80, 5), (0.80, 1.0, 3)],
                "respiratory",
            ),
            _variable(
                "tidal_volume_set", "mL", _B, (300, 500),
                [
                    _anchor(400, "6 mL/kg (average patient)", "ARDS Network",
                            "Target tidal volume for lung protection"),
                    _anchor(500, "8 mL/kg threshold", "ARDS Network",
                            "Upper limit before increased VILI risk"),
                ],
                [(100, 300, 5), (300, 500, 7), (500, 700, 5), (700, 1000, 3)],
                "respiratory",
            ),
        ),
    ),
    DiseaseTemplate(
        id="hfnc",
        name="High Flow Nasal Cannula (HFNC)",
        description="HFNC settings from respiratory_support table (device_category=High Flow NC)",
        guideline="Clinical practice & COVID-19 management",
        variables=(
            _variable(
                "lpm_set", "L/min", _H, (10, 40),
                [
                    _anchor(40, "Moderate support threshold", "Clinical practice",
                            "Flow >40 L/min indicates moderate respiratory distress"),
                    _anchor(60, "High flow threshold", "HFNC literature",
                            "Maximum HFNC flow, may need escalation to NIPPV/IMV"),
                ],
                [(0, 10, 3), (10, 40, 5), (40, 60, 5), (60, 80, 3)],
                "respiratory",
            ),
            _variable(
                "fio2_set", "fraction (0-1)", _H, (0.21, 0.50),
                [
                    _anchor(0.50, "Moderate hypoxemia", "Clinical practice",
                            "FiO2 >0.5 on HFNC indicates significant hypoxemia"),
                    _anchor(0.80, "Severe hypoxemia", "HFNC failure criteria",
                            "FiO2 >0.8 suggests impending HFNC failure"),
                ],
                [(0.21, 0.50, 5), (0.50, 0.80, 5), (0.80, 1.0, 3)],
                "respiratory",
            ),
        ),
    ),
    DiseaseTemplate(
        id="nippv",
        name="NIPPV/BiPAP Settings",
        description="NIPPV from respiratory_support table (device_category=NIPPV)",
        guideline="NIV guidelines & COPD/CHF management",
        variables=(
            _variable(
                "peak_inspiratory_pressure_set", "cmH2O", _H, (8, 15),
                [
                    _anchor(15, "Moderate IPAP", "NIV guidelines",
                            "IPAP >15 indicates moderate respiratory distress"),
                    _anchor(20, "High IPAP", "NIV guidelines",
                            "IPAP >20 suggests NIV failure risk"),
                ],
                [(4, 8, 3), (8, 15, 5), (15, 20, 5), (20, 30, 3)],
                "respiratory",
            ),
            _variable(
                "peep_set", "cmH2O", _H, (4, 8),
                [
                    _anchor(8, "Moderate EPAP threshold", "NIV guidelines",
                            "EPAP (PEEP) >8 indicates significant oxygenation deficit"),
                    _anchor(12, "High EPAP threshold", "Clinical practice",
                            "EPAP (PEEP) >12 suggests severe hypoxemia"),
                ],
                [(0, 4, 3), (4, 8, 5), (8, 12, 5), (12, 20, 3)],
                "respiratory",
            ),
            _variable(
                "fio2_set", "fraction (0-1)", _H, (0.21, 0.50),
                [
                    _anchor(0.50, "Moderate oxygen requirement", "NIV guidelines",
                            "FiO2 >0.5 on NIPPV indicates significant hypoxemia"),
                    _anchor(0.70, "High oxygen requirement", "NIV failure criteria",
                            "FiO2 >0.7 suggests impending NIV failure"),
                ],
                [(0.21, 0.50, 5), (0.50, 0.70, 5), (0.70, 1.0, 3)],
                "respiratory",
            ),
        ),
    ),
    DiseaseTemplate(
        id="vent_advanced",
        name="Advanced Ventilator Settings",
        description="Additional IMV parameters for comprehensive monitoring",
        guideline="Lung Protective Ventilation & ARDS Management",
        variables=(
            _variable(
                "pressure_control_set", "cmH2O", _H, (10, 20),
                [
                    _anchor(20, "Moderate driving pressure", "Lung protection guidelines",
                            "Driving pressure >20 associated with VILI risk"),
                    _anchor(25, "High driving pressure", "ARDS literature",
                            "Driving pressure >25 significantly increases mortality"),
                ],
                [(5, 10, 3), (10, 20, 5), (20, 25, 5), (25, 40, 3)],
                "respiratory",
            ),
            _variable(
                "pressure_support_set", "cmH2O", _B, (5, 15),
                [
                    _anchor(15, "Moderate support", "Weaning protocols",
                            "PS >15 indicates significant ventilatory support need"),
                    _anchor(20, "High support", "Clinical practice",
                            "PS >20 suggests difficult weaning"),
                ],
                [(0, 5, 3), (5, 15, 5), (15, 20, 5), (20, 30, 3)],
                "respiratory",
            ),
            _variable(
                "inspiratory_time_set", "seconds", _B, (0.8, 1.2),
                [
                    _anchor(1.5, "Prolonged inspiratory time", "ARDS ventilation strategies",
                            "I-time >1.5 sec used in severe ARDS"),
                    _anchor(2.0, "Inverse ratio threshold", "Inverse ratio ventilation literature",
                            "I-time >2.0 sec indicates inverse ratio ventilation"),
                ],
                [(0.5, 0.8, 3), (0.8, 1.2, 5), (1.2, 1.5, 3), (1.5, 2.0, 3), (2.0, 4.0, 3)],
                "respiratory",
            ),
            _variable(
                "mean_airway_pressure_obs", "cmH2O", _B, (8, 15),
                [
                    _anchor(15, "Elevated MAP", "Oxygenation strategies",
                            "MAP >15 used for refractory hypoxemia"),
                    _anchor(20, "High MAP", "ARDS management",
                            "MAP >20 indicates severe ARDS with aggressive oxygenation"),
                ],
                [(4, 8, 3), (8, 15, 5), (15, 20, 5), (20, 35, 3)],
                "respiratory",
            ),
            _variable(
                "minute_vent_obs", "L/min", _B, (5, 10),
                [
                    _anchor(10, "Increased minute ventilation", "Metabolic compensation",
                            "MV >10 suggests metabolic acidosis or high CO2 production"),
                    _anchor(15, "High minute ventilation", "Clinical practice",
                            "MV >15 indicates severe metabolic derangement"),
                ],
                [(2, 5, 3), (5, 10, 5), (10, 15, 5), (15, 25, 3)],
                "respiratory",
            ),
        ),
    ),
    DiseaseTemplate(
        id="resp_rate_flow",
        name="Respiratory Rate & Flow Parameters",
        description="Respiratory rate and flow settings for volume control ventilation",
        guideline="ARDS Network & Clinical Practice",
        variables=(
            _variable(
                "resp_rate_set", "breaths/min", _B, (12, 20),
                [
                    _anchor(12, "Lower normal threshold", "Clinical practice",
                            "RR <12 may indicate oversedation or respiratory depression"),
                    _anchor(20, "Upper normal threshold", "Clinical practice",
                            "RR >20 indicates tachypnea, potential respiratory distress"),
                    _anchor(30, "Tachypnea threshold", "ARDS Network",
                            "RR >30 indicates significant respiratory distress"),
                    _anchor(40, "Severe tachypnea", "Clinical practice",
                            "RR >40 indicates severe respiratory failure"),
                ],
                [(6, 12, 3), (12, 20, 4), (20, 30, 5), (30, 50, 3)],
                "respiratory",
            ),
            _variable(
                "flow_rate_set", "L/min", _B, (40, 60),
                [
                    _anchor(40, "Standard flow", "Clinical practice",
                            "Flow 40 L/min is typical for volume control ventilation"),
                    _anchor(60, "High flow threshold", "Ventilator management",
                            "Flow >60 L/min used for higher minute ventilation demands"),
                    _anchor(80, "Very high flow", "Clinical practice",
                            "Flow >80 L/min indicates very high ventilatory demands"),
                ],
                [(20, 40, 3), (40, 60, 5), (60, 80, 3), (80, 120, 3)],
                "respiratory",
            ),
            _variable(
                "peak_inspiratory_pressure_set", "cmH2O", _H, (15, 30),
                [
                    _anchor(30, "Elevated PIP threshold", "ARDS Network",
                            "PIP >30 cmH2O indicates elevated airway pressures"),
                    _anchor(35, "High PIP, barotrauma concern", "Lung protective ventilation",
                            "PIP >35 cmH2O increases barotrauma risk"),
                    _anchor(40, "Very high PIP, immediate intervention", "Clinical practice",
                            "PIP >40 cmH2O requires immediate assessment and intervention"),
                ],
                [(10, 15, 3), (15, 30, 5), (30, 35, 3), (35, 40, 3), (40, 50, 3)],
                "respiratory",
            ),
        ),
    ),
]

TEMPLATES: Dict[str, DiseaseTemplate] = {t.id: t for t in _TEMPLATES}


def get_template(template_id: str) -> DiseaseTemplate:
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise KeyError(f"Unknown disease template: {template_id!r}") from None


def list_templates() -> List[DiseaseTemplate]:
    return list(_TEMPLATES)
