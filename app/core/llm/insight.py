"""
Insight Types

The narrative triple returned to callers, and the wrapper that records
whether it came from the service or from the fixed fallback.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Insight(BaseModel):
    """Summary, risk analysis and recommendations for one evaluation."""
    model_config = ConfigDict(populate_by_name=True, strict=True, frozen=True)

    summary: str
    recommendations: List[str]
    risk_analysis: str = Field(alias="riskAnalysis")


FALLBACK_INSIGHT = Insight(
    summary=(
        "Based on the input data, your CardioMetAge suggests your biological "
        "system is aging relative to your chronological age."
    ),
    risk_analysis=(
        "Elevated biomarkers like HbA1c and CRP are major contributors to "
        "cardiometabolic aging."
    ),
    recommendations=[
        "Consult with a healthcare provider regarding blood glucose and inflammation markers.",
        "Maintain a healthy weight and waist circumference through balanced nutrition.",
        "Engage in regular cardiovascular exercise to improve heart rate and blood pressure.",
    ],
)


class InsightSource(str, Enum):
    """Which path produced an Insight."""
    SERVICE = "service"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class InsightOutcome:
    """An Insight plus its provenance."""
    insight: Insight
    source: InsightSource
    reason: Optional[str] = None     # why the fallback was used
    model: Optional[str] = None
    latency_ms: float = 0.0

    @property
    def is_fallback(self) -> bool:
        return self.source == InsightSource.FALLBACK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "insight": self.insight.model_dump(by_alias=True),
            "source": self.source.value,
            "reason": self.reason,
            "model": self.model,
            "latency_ms": round(self.latency_ms, 2),
        }
