"""
Narrative Insight Module

Uses Gemini to explain an already-computed CardioMetAge result.
The LLM is NON-DECISIONAL: it never changes the score or the status.

- LLM receives: chronological/predicted age, age gap, selected biomarkers
- LLM outputs: summary, risk analysis, recommendations (JSON)
- Any failure after dispatch degrades to a fixed fallback Insight
"""
from .gemini_client import GeminiClient, GeminiConfig, GeminiModel, GeminiResponse
from .insight import Insight, InsightOutcome, InsightSource, FALLBACK_INSIGHT
from .narrative_request import NarrativeRequest, build_narrative_request, INSIGHT_RESPONSE_SCHEMA
from .narrative_service import NarrativeService, parse_insight, default_gemini_config

__all__ = [
    "GeminiClient",
    "GeminiConfig",
    "GeminiModel",
    "GeminiResponse",
    "Insight",
    "InsightOutcome",
    "InsightSource",
    "FALLBACK_INSIGHT",
    "NarrativeRequest",
    "build_narrative_request",
    "INSIGHT_RESPONSE_SCHEMA",
    "NarrativeService",
    "parse_insight",
    "default_gemini_config",
]
