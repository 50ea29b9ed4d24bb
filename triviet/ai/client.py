import asyncio
import copy
import json
import logging
import re
from typing import Any

import litellm
from pydantic import BaseModel, ValidationError

from triviet.ai.errors import AIProviderError, AISchemaValidationError, classify_provider_error
from triviet.config.settings import get_settings


logger = logging.getLogger(__name__)

# A malformed structured answer is asked for once more before giving up
_STRUCTURED_ATTEMPTS = 2

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)```", re.IGNORECASE | re.DOTALL)


class LLMClient:
    """Async LiteLLM wrapper used by the summary, learning path and exercise services.

    The model comes from the constructor or, when omitted, from
    ``PRIMARY_LLM_MODEL``. Every provider failure leaves this class as an
    ``AIRuntimeError``.
    """

    def __init__(self, model: str | None = None) -> None:
        self._model = model

    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        response_format: dict[str, Any] | None = None,
        model: str | None = None,
    ) -> Any:
        """Send one chat completion request and return LiteLLM's raw response."""
        settings = get_settings()
        try:
            request_model = model or self._model or settings.primary_llm_model
        except ValueError as e:
            # An unconfigured provider is reported like any other provider failure
            logger.error("No model configured for completion request: %s", e)
            raise AIProviderError(str(e)) from e

        request: dict[str, Any] = {
            "model": request_model,
            "messages": messages,
            "temperature": settings.ai_temperature_default if temperature is None else temperature,
            "timeout": settings.ai_request_timeout,
        }
        # Leave the output budget to the provider unless the caller sets one
        if max_tokens is not None:
            request["max_tokens"] = max_tokens
        if response_format is not None:
            request["response_format"] = response_format

        try:
            return await asyncio.wait_for(litellm.acompletion(**request), timeout=settings.ai_request_timeout)
        except Exception as e:
            logger.exception("Completion request to %s failed", request_model)
            raise classify_provider_error(e, request_model) from e

    async def get_completion[T: BaseModel](
        self,
        messages: list[dict[str, Any]],
        response_model: type[T],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> T:
        """Ask for JSON matching ``response_model`` and return the validated instance."""
        response_format = json_schema_response_format(response_model)
        problem = "no attempt made"
        for attempt in range(1, _STRUCTURED_ATTEMPTS + 1):
            response = await self.complete(
                messages,
                temperature=temperature,
                max_tokens=max_tokens,
                response_format=response_format,
                model=model,
            )
            content = _message_content(response)
            try:
                return parse_structured_output(content, response_model)
            except (ValueError, ValidationError) as e:
                problem = str(e)
                logger.warning(
                    "Attempt %d/%d: %s answer did not match the schema: %s",
                    attempt,
                    _STRUCTURED_ATTEMPTS,
                    response_model.__name__,
                    problem,
                )

        msg = f"Model never returned a valid {response_model.__name__}: {problem}"
        raise AISchemaValidationError(msg, model or self._model)


def json_schema_response_format(response_model: type[BaseModel]) -> dict[str, Any]:
    """Build a strict ``response_format`` from a pydantic model's JSON schema."""
    schema = copy.deepcopy(response_model.model_json_schema())
    _make_strict(schema)
    return {
        "type": "json_schema",
        "json_schema": {"name": response_model.__name__, "schema": schema},
    }


def _make_strict(schema: Any) -> None:
    # Strict providers want every property listed in "required" and no extras
    if isinstance(schema, list):
        for entry in schema:
            _make_strict(entry)
        return
    if not isinstance(schema, dict):
        return

    properties = schema.get("properties")
    if isinstance(properties, dict) and properties:
        schema["required"] = list(properties)
        schema.setdefault("additionalProperties", False)

    for key in ("$defs", "definitions", "properties"):
        nested = schema.get(key)
        if isinstance(nested, dict):
            for entry in nested.values():
                _make_strict(entry)
    for key in ("items", "anyOf", "allOf", "oneOf"):
        _make_strict(schema.get(key))


def _message_content(response: Any) -> Any:
    """First choice's message content, or the response itself if it has no choices."""
    choices = getattr(response, "choices", None)
    if not choices:
        return response
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None)


def parse_structured_output[T: BaseModel](content: Any, response_model: type[T]) -> T:
    """Validate model output given as an instance, a dict, or JSON text (optionally in a ```json fence)."""
    if isinstance(content, response_model):
        return content
    if isinstance(content, dict):
        return response_model.model_validate(content)
    if not isinstance(content, str) or not content.strip():
        msg = "empty response"
        raise ValueError(msg)

    text = content.strip()
    fenced = _FENCED_JSON.search(text)
    if fenced:
        text = fenced.group(1).strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"response is not JSON ({e.msg})"
        raise ValueError(msg) from e
    return response_model.model_validate(data)
