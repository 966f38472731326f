"""
Assessment API Models
"""
import math
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Any, List, Optional

from app.core.scoring import BiomarkerRecord, CalculationResult
from app.core.llm import InsightOutcome


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


class BiomarkerInput(BaseModel):
    """Full set of biomarker values for a stateless evaluation."""
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    age: float = Field(..., description="Chronological age (years)")
    hba1c: float = Field(..., alias="hbA1c", description="HbA1c (%)")
    rdw: float = Field(..., description="Red cell distribution width (%)")
    sbp: float = Field(..., description="Systolic BP (mmHg)")
    dbp: float = Field(..., description="Diastolic BP (mmHg)")
    creatinine: float = Field(..., description="Creatinine (mg/dL)")
    lymphocyte_percent: float = Field(..., alias="lymphocytePercent", description="Lymphocyte (%)")
    mcv: float = Field(..., description="Mean corpuscular volume (fL)")
    pulse_rate: float = Field(..., alias="pulseRate", description="Resting pulse (bpm)")
    ua: float = Field(..., description="Uric acid (mg/dL)")
    crp: float = Field(..., description="C-reactive protein (mg/L)")
    wc: float = Field(..., description="Waist circumference (cm)")
    bun: float = Field(..., description="Blood urea nitrogen (mg/dL)")

    def to_record(self) -> BiomarkerRecord:
        return BiomarkerRecord.from_dict(self.model_dump(by_alias=True))


class BiomarkerUpdate(BaseModel):
    """Raw text entered for one field. Unparseable text is stored as 0."""
    value: str = Field(..., description="Raw user input, e.g. '5.4'")


class CalculationResponse(BaseModel):
    """Scoring result. Non-finite numbers are reported as null."""
    chronological_age: float
    predicted_age: Optional[float]
    age_gap: Optional[float]
    status: str
    is_finite: bool

    @classmethod
    def from_result(cls, result: CalculationResult) -> "CalculationResponse":
        return cls(
            chronological_age=result.chronological_age,
            predicted_age=_finite_or_none(result.predicted_age),
            age_gap=_finite_or_none(result.age_gap),
            status=result.status.value,
            is_finite=result.is_finite,
        )


class EvaluationResponse(BaseModel):
    """Stateless evaluation response."""
    biomarkers: Dict[str, float]
    result: CalculationResponse


class InsightResponse(BaseModel):
    """Narrative insight with its provenance."""
    summary: str
    recommendations: List[str]
    riskAnalysis: str
    source: str = Field(..., description="'service' or 'fallback'")
    reason: Optional[str] = None
    model: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: InsightOutcome) -> "InsightResponse":
        return cls(
            summary=outcome.insight.summary,
            recommendations=list(outcome.insight.recommendations),
            riskAnalysis=outcome.insight.risk_analysis,
            source=outcome.source.value,
            reason=outcome.reason,
            model=outcome.model,
        )


class SessionResponse(BaseModel):
    """Current state of an assessment session."""
    session_id: str
    revision: int
    biomarkers: Dict[str, float]
    result: CalculationResponse
    insight: Optional[InsightResponse] = None
    insight_loading: bool = False


class BiomarkerFieldResponse(BaseModel):
    """Display metadata for one biomarker."""
    name: str
    label: str
    unit: str
    description: str
    category: str


class HealthResponse(BaseModel):
    """Health status response."""
    status: str
    version: str
    uptime_seconds: float
    narrative_service: Dict[str, Any]
    active_sessions: int
    timestamp: str
