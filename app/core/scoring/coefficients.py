"""
CardioMetAge Regression Coefficients

Thirteen per-term weights plus the intercept of the closed-form linear
model. Terms suffixed ``_LOG`` are applied to ``ln(x + 1)``.
"""
from dataclasses import dataclass, asdict
from typing import Dict


@dataclass(frozen=True)
class CoefficientTable:
    """Immutable set of regression weights."""
    AGE: float
    HBA1C_LOG: float
    RDW: float
    SBP: float
    CREATININE: float
    LYMPHOCYTE: float
    MCV: float
    PULSE: float
    PP: float          # pulse pressure (sbp - dbp)
    UA: float          # uric acid
    CRP_LOG: float
    WC: float          # waist circumference
    BUN: float
    INTERCEPT: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


COEFFICIENTS = CoefficientTable(
    AGE=0.831320,
    HBA1C_LOG=19.5734,
    RDW=1.77394,
    SBP=0.0760217,
    CREATININE=6.18803,
    LYMPHOCYTE=-0.148076,
    MCV=0.218946,
    PULSE=0.105980,
    PP=0.0603608,
    UA=0.636711,
    CRP_LOG=2.40001,
    WC=0.0283277,
    BUN=0.0754119,
    INTERCEPT=-101.454,
)
