"""
Biomarker Record

The thirteen clinical inputs of the CardioMetAge model, their display
catalogue, and the conversion of raw user text into numeric values.

Parsing and applying are separate steps:
    parse_biomarker_value("5.4")   -> 5.4   (raises BiomarkerParseError)
    coerce_biomarker_value("abc")  -> 0.0   (never raises)
    record.replace("hba1c", 5.4)   -> new BiomarkerRecord
"""
from __future__ import annotations

import math
from dataclasses import dataclass, asdict, fields, replace as dc_replace
from typing import Dict, Mapping, Any, Tuple

from app.utils import get_logger, BiomarkerParseError, UnknownBiomarkerError

logger = get_logger(__name__)


@dataclass(frozen=True)
class BiomarkerRecord:
    """
    One snapshot of the thirteen biomarker inputs.

    Values are not range-checked; any float is accepted.
    """
    age: float                  # years
    hba1c: float                # %
    rdw: float                  # %
    sbp: float                  # mmHg
    dbp: float                  # mmHg, only used through pulse pressure
    creatinine: float           # mg/dL
    lymphocyte_percent: float   # %
    mcv: float                  # fL
    pulse_rate: float           # bpm
    ua: float                   # mg/dL, uric acid
    crp: float                  # mg/L, C-reactive protein
    wc: float                   # cm, waist circumference
    bun: float                  # mg/dL, blood urea nitrogen

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, float(getattr(self, f.name)))

    @property
    def pulse_pressure(self) -> float:
        return self.sbp - self.dbp

    def replace(self, field_name: str, value: float) -> "BiomarkerRecord":
        """Return a copy with one field swapped."""
        name = resolve_field(field_name)
        return dc_replace(self, **{name: float(value)})

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BiomarkerRecord":
        """
        Build a record from a mapping keyed by field name (snake_case or the
        camelCase aliases). Every field must be present.
        """
        values: Dict[str, float] = {}
        for key, value in data.items():
            values[resolve_field(key)] = float(value)
        missing = [name for name in FIELD_NAMES if name not in values]
        if missing:
            raise ValueError(f"Missing biomarker fields: {', '.join(missing)}")
        return cls(**values)


FIELD_NAMES: Tuple[str, ...] = tuple(f.name for f in fields(BiomarkerRecord))

# Spellings used by the original web front end
FIELD_ALIASES: Dict[str, str] = {
    "hbA1c": "hba1c",
    "lymphocytePercent": "lymphocyte_percent",
    "pulseRate": "pulse_rate",
}


def resolve_field(field_name: str) -> str:
    """Map a field name or alias to the record attribute name."""
    if field_name in FIELD_NAMES:
        return field_name
    if field_name in FIELD_ALIASES:
        return FIELD_ALIASES[field_name]
    raise UnknownBiomarkerError(field_name)


BASELINE_BIOMARKERS = BiomarkerRecord(
    age=40.0,
    hba1c=5.2,
    rdw=13.0,
    sbp=120.0,
    dbp=80.0,
    creatinine=0.9,
    lymphocyte_percent=30.0,
    mcv=90.0,
    pulse_rate=70.0,
    ua=5.0,
    crp=1.5,
    wc=90.0,
    bun=15.0,
)


# ── Field catalogue ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BiomarkerField:
    """Display metadata for one biomarker input."""
    name: str
    label: str
    unit: str
    description: str
    category: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


BIOMARKER_FIELDS: Dict[str, BiomarkerField] = {
    f.name: f for f in (
        BiomarkerField("age", "Age", "years", "Your current chronological age.", "Personal"),
        BiomarkerField("hba1c", "HbA1c", "%", "Glycated hemoglobin (3-month average blood sugar).", "Metabolic"),
        BiomarkerField("rdw", "RDW", "%", "Red cell distribution width.", "Blood"),
        BiomarkerField("sbp", "Systolic BP", "mmHg", "Top number of blood pressure reading.", "Cardiovascular"),
        BiomarkerField("dbp", "Diastolic BP", "mmHg", "Bottom number of blood pressure reading.", "Cardiovascular"),
        BiomarkerField("creatinine", "Creatinine", "mg/dL", "Kidney function marker.", "Renal"),
        BiomarkerField("lymphocyte_percent", "Lymphocyte %", "%", "Percentage of white blood cells.", "Immune"),
        BiomarkerField("mcv", "MCV", "fL", "Mean corpuscular volume (average red cell size).", "Blood"),
        BiomarkerField("pulse_rate", "Pulse Rate", "bpm", "Resting heart rate.", "Cardiovascular"),
        BiomarkerField("ua", "Uric Acid", "mg/dL", "Byproduct of purine metabolism.", "Metabolic"),
        BiomarkerField("crp", "CRP", "mg/L", "C-reactive protein (inflammation marker).", "Immune"),
        BiomarkerField("wc", "Waist Circ.", "cm", "Waist circumference at the navel.", "Metabolic"),
        BiomarkerField("bun", "BUN", "mg/dL", "Blood urea nitrogen (kidney/liver function).", "Renal"),
    )
}


# ── Raw value handling ───────────────────────────────────────────────────────

def parse_biomarker_value(raw: str) -> float:
    """
    Parse user text as a finite float.

    Raises:
        BiomarkerParseError: for empty, non-numeric or non-finite text
    """
    text = raw.strip() if isinstance(raw, str) else raw
    if text is None or text == "":
        raise BiomarkerParseError("Empty biomarker value", raw_value=raw)
    try:
        value = float(text)
    except (TypeError, ValueError):
        raise BiomarkerParseError(f"Not a number: {raw!r}", raw_value=raw) from None
    if not math.isfinite(value):
        raise BiomarkerParseError(f"Not a finite number: {raw!r}", raw_value=raw)
    return value


def coerce_biomarker_value(raw: str) -> float:
    """Parse user text, falling back to 0.0 on any parse failure."""
    try:
        return parse_biomarker_value(raw)
    except BiomarkerParseError as e:
        logger.debug(f"Coercing unparseable biomarker input to 0: {e.message}")
        return 0.0
