"""Failures of the LLM provider, grouped by how the API should answer them."""

from __future__ import annotations

import asyncio
from enum import Enum

import litellm


class AIRuntimeErrorCategory(str, Enum):
    RATE_LIMIT_OR_QUOTA = "rate_limit_or_quota"
    TIMEOUT = "timeout"
    CONTENT_TOO_LONG = "content_too_long"
    SCHEMA_VALIDATION = "schema_validation"
    PROVIDER_FAILURE = "provider_failure"


class AIRuntimeError(RuntimeError):
    """Base for every error raised by ``LLMClient``.

    ``model`` names the provider model that failed when it is known.
    """

    def __init__(self, message: str, *, category: AIRuntimeErrorCategory, model: str | None = None) -> None:
        super().__init__(message)
        self.category = category
        self.model = model

    @property
    def retryable(self) -> bool:
        """Whether sending the same request again later may succeed."""
        return self.category in {AIRuntimeErrorCategory.RATE_LIMIT_OR_QUOTA, AIRuntimeErrorCategory.TIMEOUT}


class AIRateLimitOrQuotaError(AIRuntimeError):
    def __init__(self, message: str, model: str | None = None) -> None:
        super().__init__(message, category=AIRuntimeErrorCategory.RATE_LIMIT_OR_QUOTA, model=model)


class AITimeoutError(AIRuntimeError):
    def __init__(self, message: str, model: str | None = None) -> None:
        super().__init__(message, category=AIRuntimeErrorCategory.TIMEOUT, model=model)


class AIContentTooLongError(AIRuntimeError):
    """The source text does not fit in the model's context window."""

    def __init__(self, message: str, model: str | None = None) -> None:
        super().__init__(message, category=AIRuntimeErrorCategory.CONTENT_TOO_LONG, model=model)


class AISchemaValidationError(AIRuntimeError):
    """The model answered, but not with the JSON shape that was asked for."""

    def __init__(self, message: str, model: str | None = None) -> None:
        super().__init__(message, category=AIRuntimeErrorCategory.SCHEMA_VALIDATION, model=model)


class AIProviderError(AIRuntimeError):
    def __init__(self, message: str, model: str | None = None) -> None:
        super().__init__(message, category=AIRuntimeErrorCategory.PROVIDER_FAILURE, model=model)


def classify_provider_error(error: Exception, model: str | None = None) -> AIRuntimeError:
    """Map a LiteLLM or asyncio exception onto ``AIRuntimeError``."""
    if isinstance(error, AIRuntimeError):
        return error
    if isinstance(error, litellm.RateLimitError):
        return AIRateLimitOrQuotaError(f"Provider rate limit reached: {error}", model)
    if isinstance(error, (litellm.Timeout, asyncio.TimeoutError, TimeoutError)):
        return AITimeoutError(f"Model request timed out: {error}", model)
    if isinstance(error, litellm.ContextWindowExceededError):
        return AIContentTooLongError(f"Content exceeds the model context window: {error}", model)
    return AIProviderError(f"Model completion failed: {error}", model)
