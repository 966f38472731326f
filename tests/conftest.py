"""
Pytest Configuration and Fixtures

Shared fixtures for CardioMetAge scoring and narrative tests.
"""
import json
import pytest
from pathlib import Path
import sys
from unittest.mock import AsyncMock, Mock

from langchain_core.messages import AIMessage

# Add app to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.scoring import BASELINE_BIOMARKERS, BiomarkerRecord, evaluate
from app.core.llm import GeminiClient, GeminiConfig


@pytest.fixture
def baseline_record() -> BiomarkerRecord:
    return BASELINE_BIOMARKERS


@pytest.fixture
def elevated_record() -> BiomarkerRecord:
    """Poor glycaemic control, inflammation and hypertension."""
    return BiomarkerRecord(
        age=55, hba1c=8.1, rdw=15.2, sbp=158, dbp=92, creatinine=1.4,
        lymphocyte_percent=18, mcv=96, pulse_rate=88, ua=7.9, crp=9.0,
        wc=112, bun=24,
    )


@pytest.fixture
def baseline_result(baseline_record):
    return evaluate(baseline_record)


@pytest.fixture
def service_insight_json() -> str:
    return json.dumps({
        "summary": "Your cardiometabolic profile is close to your chronological age.",
        "recommendations": [
            "Keep HbA1c below 5.7%.",
            "Maintain regular aerobic activity.",
            "Recheck CRP in 6 months.",
        ],
        "riskAnalysis": "No single marker is strongly elevated.",
    })


def make_gemini_client(ainvoke: AsyncMock) -> GeminiClient:
    """GeminiClient whose LangChain model is replaced by ``ainvoke``."""
    client = GeminiClient(GeminiConfig(api_key=None))
    client._llm = Mock(ainvoke=ainvoke)
    client._initialized = True
    return client


@pytest.fixture
def gemini_reply():
    """Factory: client that answers every prompt with ``reply`` (text or AIMessage)."""
    def _factory(reply) -> GeminiClient:
        message = reply if isinstance(reply, AIMessage) else AIMessage(content=reply)
        return make_gemini_client(AsyncMock(return_value=message))
    return _factory


@pytest.fixture
def gemini_failure():
    """Factory: client whose transport raises ``exc`` on every call."""
    def _factory(exc: Exception) -> GeminiClient:
        return make_gemini_client(AsyncMock(side_effect=exc))
    return _factory
