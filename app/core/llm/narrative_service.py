"""
Narrative Service Adapter

Sends a NarrativeRequest to Gemini and turns the JSON reply into an Insight.

Degrade-gracefully contract:
- provider errors, malformed JSON and schema mismatches all return the
  fixed FALLBACK_INSIGHT, tagged InsightSource.FALLBACK
- NarrativeDispatchError (the call could not be issued) is the only
  exception that reaches the caller
"""
from typing import Optional

from pydantic import ValidationError

from app.config import settings
from app.core.llm.gemini_client import GeminiClient, GeminiConfig
from app.core.llm.insight import Insight, InsightOutcome, InsightSource, FALLBACK_INSIGHT
from app.core.llm.narrative_request import NarrativeRequest
from app.utils import get_logger, NarrativeServiceError

logger = get_logger(__name__)

JSON_MIME_TYPE = "application/json"


def default_gemini_config() -> GeminiConfig:
    """GeminiConfig from application settings."""
    return GeminiConfig(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        temperature=settings.gemini_temperature,
        max_output_tokens=settings.gemini_max_output_tokens,
        request_timeout_seconds=settings.gemini_timeout_seconds,
    )


def parse_insight(text: str) -> Insight:
    """
    Trim and parse a JSON reply.

    Raises:
        pydantic.ValidationError: malformed JSON or wrong shape
    """
    return Insight.model_validate_json(text.strip())


class NarrativeService:
    """
    Best-effort insight generation.

    Holds no per-request state; each call is independent.
    """

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or GeminiClient(default_gemini_config())
        self._fallback_count = 0

    @property
    def is_available(self) -> bool:
        return self.client.is_available

    async def request_insight(self, request: NarrativeRequest) -> InsightOutcome:
        """
        Generate an Insight for a prepared request.

        Returns:
            InsightOutcome from the service, or the fallback outcome

        Raises:
            NarrativeDispatchError: the request could not be sent
        """
        try:
            response = await self.client.generate_async(
                request.prompt,
                response_mime_type=JSON_MIME_TYPE,
                response_schema=request.schema_dict(),
            )
        except NarrativeServiceError as e:
            return self._fallback(f"provider error: {e.message}")

        try:
            insight = parse_insight(response.text)
        except ValidationError as e:
            logger.warning(f"Failed to parse Gemini response: {e.error_count()} error(s)")
            return self._fallback(f"invalid response: {e.errors()[0]['type']}")

        return InsightOutcome(
            insight=insight,
            source=InsightSource.SERVICE,
            model=response.model,
            latency_ms=response.latency_ms,
        )

    def _fallback(self, reason: str) -> InsightOutcome:
        self._fallback_count += 1
        logger.warning(f"Using fallback insight ({reason})")
        return InsightOutcome(
            insight=FALLBACK_INSIGHT.model_copy(deep=True),
            source=InsightSource.FALLBACK,
            reason=reason,
        )

    def get_stats(self):
        return {**self.client.get_stats(), "fallback_count": self._fallback_count}
