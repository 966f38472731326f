"""
CardioMetAge Scoring

Deterministic biological-age estimate from thirteen clinical biomarkers.

Usage:
    from app.core.scoring import evaluate, BASELINE_BIOMARKERS

    result = evaluate(BASELINE_BIOMARKERS.replace("crp", 4.0))
"""
from .coefficients import CoefficientTable, COEFFICIENTS
from .biomarkers import (
    BiomarkerRecord,
    BiomarkerField,
    BASELINE_BIOMARKERS,
    BIOMARKER_FIELDS,
    FIELD_NAMES,
    resolve_field,
    parse_biomarker_value,
    coerce_biomarker_value,
)
from .engine import AgeStatus, CalculationResult, evaluate, predict_age, classify_age_gap

__all__ = [
    "CoefficientTable",
    "COEFFICIENTS",
    "BiomarkerRecord",
    "BiomarkerField",
    "BASELINE_BIOMARKERS",
    "BIOMARKER_FIELDS",
    "FIELD_NAMES",
    "resolve_field",
    "parse_biomarker_value",
    "coerce_biomarker_value",
    "AgeStatus",
    "CalculationResult",
    "evaluate",
    "predict_age",
    "classify_age_gap",
]
