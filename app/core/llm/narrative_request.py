"""
Narrative Request Builder

Turns a BiomarkerRecord and its CalculationResult into the prompt and JSON
response schema sent to the narrative service.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Any

from app.core.scoring import BiomarkerRecord, CalculationResult

INSIGHT_RESPONSE_SCHEMA: Mapping[str, Any] = MappingProxyType({
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "recommendations": {
            "type": "array",
            "items": {"type": "string"},
        },
        "riskAnalysis": {"type": "string"},
    },
    "required": ["summary", "recommendations", "riskAnalysis"],
})

PROMPT_TEMPLATE = """Analyze the following cardiometabolic data:
Chronological Age: {chronological_age}
Predicted CardioMetAge: {predicted_age:.1f}
Age Gap: {age_gap:+.1f} years

Biomarkers provided:
- HbA1c: {hba1c}%
- Creatinine: {creatinine} mg/dL
- CRP (Inflammation): {crp} mg/L
- SBP/DBP: {sbp}/{dbp} mmHg
- Waist Circumference: {wc} cm
- BUN: {bun} mg/dL
- Lymphocyte %: {lymphocyte_percent}%
- Pulse: {pulse_rate} bpm

The CardioMetAge is a measure of biological aging related to cardiometabolic health.
Provide a professional summary, risk analysis, and 3 actionable recommendations to improve these biomarkers."""


@dataclass(frozen=True)
class NarrativeRequest:
    """Prompt text plus the structured output schema it must follow."""
    prompt: str
    response_schema: Mapping[str, Any] = field(default_factory=lambda: INSIGHT_RESPONSE_SCHEMA)

    def schema_dict(self) -> dict:
        """Plain nested-dict copy of the schema, for client libraries."""
        return _thaw(self.response_schema)


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_thaw(v) for v in value]
    return value


def _num(value: float) -> str:
    # 120.0 -> "120", 5.2 -> "5.2"
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


def build_narrative_request(record: BiomarkerRecord, result: CalculationResult) -> NarrativeRequest:
    """Render the insight prompt for one record/result pair."""
    prompt = PROMPT_TEMPLATE.format(
        chronological_age=_num(result.chronological_age),
        predicted_age=result.predicted_age,
        age_gap=result.age_gap,
        hba1c=_num(record.hba1c),
        creatinine=_num(record.creatinine),
        crp=_num(record.crp),
        sbp=_num(record.sbp),
        dbp=_num(record.dbp),
        wc=_num(record.wc),
        bun=_num(record.bun),
        lymphocyte_percent=_num(record.lymphocyte_percent),
        pulse_rate=_num(record.pulse_rate),
    )
    return NarrativeRequest(prompt=prompt)
