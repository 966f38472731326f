"""
CardioMetAge Scoring Engine

Evaluates the closed-form regression over a BiomarkerRecord and classifies
the resulting age gap.

Usage:
    from app.core.scoring import evaluate, BASELINE_BIOMARKERS

    result = evaluate(BASELINE_BIOMARKERS)
    print(result.predicted_age, result.age_gap, result.status.value)

Numeric edge case: ln(x + 1) is taken with numpy, so hba1c or crp equal to
-1 gives -inf and anything below gives nan. These values are not trapped;
they flow through to predicted_age and age_gap.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any

import numpy as np

from .biomarkers import BiomarkerRecord
from .coefficients import CoefficientTable, COEFFICIENTS

# Age-gap thresholds (years). Strict inequalities: exactly ±2 is average.
OPTIMAL_GAP_THRESHOLD = -2.0
AT_RISK_GAP_THRESHOLD = 2.0


class AgeStatus(str, Enum):
    """Classification of the age gap."""
    OPTIMAL = "optimal"
    AVERAGE = "average"
    AT_RISK = "at-risk"


@dataclass(frozen=True)
class CalculationResult:
    """Output of one evaluation. Always derived, never stored."""
    chronological_age: float
    predicted_age: float
    age_gap: float
    status: AgeStatus

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.predicted_age) and math.isfinite(self.age_gap)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chronological_age": self.chronological_age,
            "predicted_age": self.predicted_age,
            "age_gap": self.age_gap,
            "status": self.status.value,
        }


def _log1p_term(x: float) -> float:
    # ln(x + 1) computed as written rather than via log1p
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.log(x + 1.0))


def predict_age(record: BiomarkerRecord, table: CoefficientTable = COEFFICIENTS) -> float:
    """Regression output for one record. Terms are summed in model order."""
    pp = record.sbp - record.dbp
    return (
        table.AGE * record.age
        + table.HBA1C_LOG * _log1p_term(record.hba1c)
        + table.RDW * record.rdw
        + table.SBP * record.sbp
        + table.CREATININE * record.creatinine
        + table.LYMPHOCYTE * record.lymphocyte_percent
        + table.MCV * record.mcv
        + table.PULSE * record.pulse_rate
        + table.PP * pp
        + table.UA * record.ua
        + table.CRP_LOG * _log1p_term(record.crp)
        + table.WC * record.wc
        + table.BUN * record.bun
        + table.INTERCEPT
    )


def classify_age_gap(age_gap: float) -> AgeStatus:
    """First match wins; a nan gap falls through to AVERAGE."""
    if age_gap < OPTIMAL_GAP_THRESHOLD:
        return AgeStatus.OPTIMAL
    if age_gap > AT_RISK_GAP_THRESHOLD:
        return AgeStatus.AT_RISK
    return AgeStatus.AVERAGE


def evaluate(record: BiomarkerRecord, table: CoefficientTable = COEFFICIENTS) -> CalculationResult:
    """
    Compute the CardioMetAge result for a record.

    Pure and deterministic: identical inputs give bit-identical results.
    """
    predicted_age = predict_age(record, table)
    age_gap = predicted_age - record.age
    return CalculationResult(
        chronological_age=record.age,
        predicted_age=predicted_age,
        age_gap=age_gap,
        status=classify_age_gap(age_gap),
    )
