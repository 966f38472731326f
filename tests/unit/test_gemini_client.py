"""
Unit Tests for the Gemini Client

The LangChain model is replaced with AsyncMock; no network access.
"""
import pytest
from langchain_core.messages import AIMessage

from app.core.llm import GeminiClient, GeminiConfig, GeminiModel, GeminiResponse
from app.utils import NarrativeServiceError, NarrativeDispatchError


@pytest.fixture
def gemini_config() -> GeminiConfig:
    """Test config without an API key."""
    return GeminiConfig(
        api_key=None,
        model=GeminiModel.FLASH_3_PREVIEW,
        temperature=0.3
    )


class TestGeminiClient:
    """Tests for GeminiClient."""

    def test_init_without_api_key(self, gemini_config):
        client = GeminiClient(gemini_config)
        assert not client.is_available

    async def test_generate_without_api_key_raises(self, gemini_config):
        client = GeminiClient(gemini_config)
        with pytest.raises(NarrativeDispatchError) as exc_info:
            await client.generate_async("Explain the CardioMetAge result.")
        assert exc_info.value.code == "NARRATIVE_UNAVAILABLE"
        assert exc_info.value.details["model"] == "gemini-3-flash-preview"

    def test_model_name_from_plain_string(self):
        client = GeminiClient(GeminiConfig(api_key=None, model="gemini-2.0-flash"))
        assert client.get_stats()["model"] == "gemini-2.0-flash"

    async def test_generate_returns_text(self, gemini_reply):
        client = gemini_reply('{"summary": "ok"}')
        response = await client.generate_async("prompt")

        assert isinstance(response, GeminiResponse)
        assert response.text == '{"summary": "ok"}'
        assert response.finish_reason == "STOP"
        assert response.latency_ms >= 0

    async def test_structured_output_passed_per_call(self, gemini_reply):
        client = gemini_reply("{}")
        schema = {"type": "object", "required": ["summary"]}

        await client.generate_async("prompt", response_mime_type="application/json", response_schema=schema)

        client._llm.ainvoke.assert_awaited_once_with(
            "prompt", response_mime_type="application/json", response_schema=schema
        )

    async def test_plain_call_sends_prompt_only(self, gemini_reply):
        client = gemini_reply("text")
        await client.generate_async("prompt")
        client._llm.ainvoke.assert_awaited_once_with("prompt")

    async def test_token_usage(self, gemini_reply):
        message = AIMessage(
            content="{}",
            usage_metadata={"input_tokens": 120, "output_tokens": 45, "total_tokens": 165},
        )
        client = gemini_reply(message)
        response = await client.generate_async("prompt")

        assert response.prompt_tokens == 120
        assert response.completion_tokens == 45

    async def test_list_content_is_flattened(self, gemini_reply):
        message = AIMessage(content=[{"type": "text", "text": '{"a": '}, "1}"])
        client = gemini_reply(message)
        response = await client.generate_async("prompt")
        assert response.text == '{"a": 1}'

    async def test_provider_error_is_wrapped(self, gemini_failure):
        original = RuntimeError("quota exceeded")
        client = gemini_failure(original)

        with pytest.raises(NarrativeServiceError) as exc_info:
            await client.generate_async("prompt")

        assert exc_info.value.__cause__ is original
        assert exc_info.value.details["exception"] == "RuntimeError"
        assert client.get_stats()["failure_count"] == 1

    async def test_stats(self, gemini_reply):
        client = gemini_reply("{}")
        await client.generate_async("one")
        await client.generate_async("two")

        stats = client.get_stats()
        assert stats["is_available"]
        assert stats["request_count"] == 2
        assert stats["last_request"] is not None

    def test_response_to_dict(self):
        response = GeminiResponse(text="t", model="m", latency_ms=12.3456)
        data = response.to_dict()
        assert data["latency_ms"] == 12.35
        assert set(data) == {"text", "model", "finish_reason", "prompt_tokens", "completion_tokens", "latency_ms"}
