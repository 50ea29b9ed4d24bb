"""Tests for the LiteLLM client wrapper; the provider call itself is always mocked."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import litellm
import pytest

from triviet.ai.client import LLMClient, json_schema_response_format, parse_structured_output
from triviet.ai.errors import (
    AIContentTooLongError,
    AIProviderError,
    AIRateLimitOrQuotaError,
    AIRuntimeErrorCategory,
    AISchemaValidationError,
    AITimeoutError,
    classify_provider_error,
)
from triviet.learning_paths.schemas import LearningPlan
from triviet.mindmaps.schemas import SummaryResult


def _response(content: str) -> MagicMock:
    """Build an object shaped like a LiteLLM ModelResponse."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


SUMMARY_JSON = json.dumps(
    {
        "mindMap": {"title": "Dao động điều hòa", "children": [{"title": "$x = A\\cos(\\omega t + \\varphi)$"}]},
        "flashcards": [{"question": "Chu kỳ là gì?", "answer": "Thời gian thực hiện một dao động"}],
    }
)


@pytest.fixture
def mock_acompletion():
    with patch("triviet.ai.client.litellm.acompletion", new_callable=AsyncMock) as mocked:
        yield mocked


class TestGetCompletion:
    @pytest.mark.asyncio
    async def test_parses_json_content(self, mock_acompletion) -> None:
        mock_acompletion.return_value = _response(SUMMARY_JSON)

        result = await LLMClient().get_completion(
            messages=[{"role": "user", "content": "tóm tắt"}],
            response_model=SummaryResult,
        )

        assert isinstance(result, SummaryResult)
        assert result.mind_map.children[0].title == "$x = A\\cos(\\omega t + \\varphi)$"
        mock_acompletion.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_parses_fenced_json_block(self, mock_acompletion) -> None:
        mock_acompletion.return_value = _response('Here is the plan:\n```json\n{"plan": ["Số tự nhiên", "Phân số"]}\n```')

        result = await LLMClient().get_completion(messages=[], response_model=LearningPlan)

        assert result.plan == ["Số tự nhiên", "Phân số"]

    @pytest.mark.asyncio
    async def test_request_uses_configured_model_and_json_schema(self, mock_acompletion, monkeypatch) -> None:
        monkeypatch.setenv("PRIMARY_LLM_MODEL", "gemini/gemini-2.5-flash")
        monkeypatch.setenv("AI_TEMPERATURE_DEFAULT", "0.2")
        mock_acompletion.return_value = _response('{"plan": ["a"]}')

        await LLMClient().get_completion(messages=[{"role": "user", "content": "x"}], response_model=LearningPlan)

        kwargs = mock_acompletion.await_args.kwargs
        assert kwargs["model"] == "gemini/gemini-2.5-flash"
        assert kwargs["temperature"] == 0.2
        assert "max_tokens" not in kwargs
        response_format = kwargs["response_format"]
        assert response_format["type"] == "json_schema"
        assert response_format["json_schema"]["name"] == "LearningPlan"
        assert response_format["json_schema"]["schema"]["required"] == ["plan"]

    @pytest.mark.asyncio
    async def test_explicit_model_overrides_settings(self, mock_acompletion) -> None:
        mock_acompletion.return_value = _response('{"plan": ["a"]}')

        await LLMClient(model="openai/gpt-4.1").get_completion(messages=[], response_model=LearningPlan)

        assert mock_acompletion.await_args.kwargs["model"] == "openai/gpt-4.1"

    @pytest.mark.asyncio
    async def test_retries_once_then_raises_schema_error(self, mock_acompletion) -> None:
        mock_acompletion.return_value = _response("Xin lỗi, tôi không thể trả lời.")

        with pytest.raises(AISchemaValidationError):
            await LLMClient().get_completion(messages=[], response_model=SummaryResult)

        assert mock_acompletion.await_count == 2

    @pytest.mark.asyncio
    async def test_recovers_on_second_attempt(self, mock_acompletion) -> None:
        mock_acompletion.side_effect = [_response('{"wrong": true}'), _response(SUMMARY_JSON)]

        result = await LLMClient().get_completion(messages=[], response_model=SummaryResult)

        assert result.mind_map.title == "Dao động điều hòa"
        assert mock_acompletion.await_count == 2


class TestProviderErrors:
    @pytest.mark.asyncio
    async def test_rate_limit(self, mock_acompletion) -> None:
        mock_acompletion.side_effect = litellm.RateLimitError(
            message="quota exceeded", llm_provider="openai", model="gpt-4o-mini"
        )

        with pytest.raises(AIRateLimitOrQuotaError):
            await LLMClient().complete(messages=[])

    @pytest.mark.asyncio
    async def test_timeout(self, mock_acompletion) -> None:
        mock_acompletion.side_effect = asyncio.TimeoutError()

        with pytest.raises(AITimeoutError):
            await LLMClient().complete(messages=[])

    @pytest.mark.asyncio
    async def test_other_failures(self, mock_acompletion) -> None:
        mock_acompletion.side_effect = RuntimeError("connection reset")

        with pytest.raises(AIProviderError, match="connection reset"):
            await LLMClient().complete(messages=[])

    @pytest.mark.asyncio
    async def test_context_window_exceeded(self, mock_acompletion) -> None:
        mock_acompletion.side_effect = litellm.ContextWindowExceededError(
            message="too many tokens", model="gpt-4o-mini", llm_provider="openai"
        )

        with pytest.raises(AIContentTooLongError) as exc_info:
            await LLMClient(model="openai/gpt-4o-mini").complete(messages=[])

        assert exc_info.value.model == "openai/gpt-4o-mini"
        assert not exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_missing_model_is_provider_error(self, mock_acompletion, monkeypatch) -> None:
        monkeypatch.delenv("PRIMARY_LLM_MODEL", raising=False)

        with pytest.raises(AIProviderError, match="PRIMARY_LLM_MODEL"):
            await LLMClient().get_completion(messages=[], response_model=LearningPlan)

        mock_acompletion.assert_not_awaited()

    def test_classification_keeps_runtime_errors(self) -> None:
        error = AITimeoutError("slow")
        assert classify_provider_error(error) is error
        assert error.retryable
        assert classify_provider_error(ValueError("x")).category == AIRuntimeErrorCategory.PROVIDER_FAILURE


class TestResponseFormat:
    def test_nested_properties_all_required(self) -> None:
        response_format = json_schema_response_format(SummaryResult)
        schema = response_format["json_schema"]["schema"]

        assert schema["required"] == ["mindMap", "flashcards"]
        assert schema["additionalProperties"] is False
        node_schema = schema["$defs"]["MindMapNodeSchema"]
        assert node_schema["required"] == ["title", "children"]
        assert node_schema["additionalProperties"] is False


class TestParseStructuredOutput:
    def test_accepts_dict(self) -> None:
        assert parse_structured_output({"plan": ["a"]}, LearningPlan).plan == ["a"]

    def test_accepts_unlabeled_fence(self) -> None:
        assert parse_structured_output('```\n{"plan": ["b"]}\n```', LearningPlan).plan == ["b"]

    @pytest.mark.parametrize("content", [None, "", "   ", "plain prose"])
    def test_rejects_non_json(self, content) -> None:
        with pytest.raises(ValueError):
            parse_structured_output(content, LearningPlan)
