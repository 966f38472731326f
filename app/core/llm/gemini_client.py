"""
Gemini API Client

Async wrapper around Google Gemini (via LangChain) for JSON-constrained
narrative generation. One attempt per call: no retries, no cache.
"""
from dataclasses import dataclass
from typing import Dict, Any, Optional
from enum import Enum
from datetime import datetime

from langchain_google_genai import ChatGoogleGenerativeAI

from app.utils import get_logger, NarrativeServiceError, NarrativeDispatchError

logger = get_logger(__name__)


class GeminiModel(str, Enum):
    """Default Gemini model; any model id string is also accepted."""
    FLASH_3_PREVIEW = "gemini-3-flash-preview"


@dataclass
class GeminiConfig:
    """Configuration for Gemini client."""
    api_key: Optional[str] = None
    model: GeminiModel = GeminiModel.FLASH_3_PREVIEW
    temperature: float = 0.5

    max_output_tokens: int = 2048
    top_p: float = 0.8
    top_k: int = 40

    request_timeout_seconds: int = 30


@dataclass
class GeminiResponse:
    """Raw text reply from Gemini."""
    text: str
    model: str
    finish_reason: str = "STOP"
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "model": self.model,
            "finish_reason": self.finish_reason,
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "latency_ms": round(self.latency_ms, 2),
        }


class GeminiClient:
    """
    Client for Google Gemini API.

    ``generate_async`` raises NarrativeDispatchError when no model is
    configured and NarrativeServiceError when the provider call fails.
    """

    def __init__(self, config: Optional[GeminiConfig] = None):
        """
        Initialize Gemini client.

        Args:
            config: Optional configuration, uses defaults if not provided
        """
        self.config = config or GeminiConfig()
        self._llm = None
        self._request_count = 0
        self._failure_count = 0
        self._last_request_time = None
        self._initialized = False

        self._initialize()

    def _initialize(self):
        """Build the LangChain chat model."""
        if not self.config.api_key:
            logger.warning("No Gemini API key provided - narrative insights disabled")
            self._initialized = False
            return

        try:
            self._llm = ChatGoogleGenerativeAI(
                model=self._model_name,
                temperature=self.config.temperature,
                max_output_tokens=self.config.max_output_tokens,
                top_p=self.config.top_p,
                top_k=self.config.top_k,
                timeout=self.config.request_timeout_seconds,
                max_retries=0,
                google_api_key=self.config.api_key
            )

            self._initialized = True
            logger.info(f"LangChain Gemini client initialized with model: {self._model_name}")

        except Exception as e:
            logger.error(f"Failed to initialize LangChain Gemini: {e}")
            self._initialized = False

    @property
    def is_available(self) -> bool:
        """Check if Gemini is available for use."""
        return self._initialized

    @property
    def _model_name(self) -> str:
        """Resolve model name whether config.model is an enum or a plain string."""
        m = self.config.model
        return m.value if hasattr(m, "value") else str(m)

    async def generate_async(
        self,
        prompt: str,
        response_mime_type: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None
    ) -> GeminiResponse:
        """
        Send one prompt and return the reply text.

        Args:
            prompt: The user prompt
            response_mime_type: Output MIME type for this call, e.g. application/json
            response_schema: JSON schema the reply must follow for this call

        Raises:
            NarrativeDispatchError: client is not configured
            NarrativeServiceError: the provider call failed
        """
        if not self.is_available:
            raise NarrativeDispatchError(
                "Gemini client is not configured",
                details={"model": self._model_name}
            )

        call_kwargs: Dict[str, Any] = {}
        if response_mime_type:
            call_kwargs["response_mime_type"] = response_mime_type
        if response_schema is not None:
            call_kwargs["response_schema"] = response_schema

        start_time = datetime.now()
        try:
            response = await self._llm.ainvoke(prompt, **call_kwargs)
        except Exception as e:
            self._failure_count += 1
            logger.error(f"Async Gemini generation failed: {e}")
            raise NarrativeServiceError(
                f"Gemini generation failed: {e}",
                details={"model": self._model_name, "exception": type(e).__name__}
            ) from e

        latency = (datetime.now() - start_time).total_seconds() * 1000

        prompt_tokens = 0
        completion_tokens = 0
        usage = getattr(response, "usage_metadata", None)
        if usage:
            prompt_tokens = usage.get("input_tokens", 0)
            completion_tokens = usage.get("output_tokens", 0)

        self._request_count += 1
        self._last_request_time = datetime.now()

        return GeminiResponse(
            text=self._extract_text(response),
            model=self._model_name,
            finish_reason="STOP",
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency
        )

    @staticmethod
    def _extract_text(response: Any) -> str:
        """Flatten LangChain message content (string or list of parts)."""
        content = response.content if hasattr(response, "content") else response
        if isinstance(content, list):
            parts = []
            for part in content:
                if isinstance(part, str):
                    parts.append(part)
                elif isinstance(part, dict):
                    parts.append(part.get("text", ""))
            return "".join(parts)
        return str(content)

    def get_stats(self) -> Dict[str, Any]:
        """Get client statistics."""
        return {
            "is_available": self.is_available,
            "model": self._model_name,
            "request_count": self._request_count,
            "failure_count": self._failure_count,
            "last_request": self._last_request_time.isoformat() if self._last_request_time else None
        }
