"""Centralized error handling with consistent categorized responses.

Every error response has the shape::

    {"error": {"category": ..., "code": ..., "detail": ..., "suggestions": [...], "metadata": {...}}}
"""

import logging
from typing import Any
from uuid import UUID, uuid4

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from triviet.ai.errors import AIRuntimeError, AIRuntimeErrorCategory
from triviet.exceptions import InvalidTreeError, ResourceNotFoundError, StorageQuotaExceededError


logger = logging.getLogger(__name__)


# === Error Categories ===


class ErrorCategory:
    """Error category constants."""

    VALIDATION = "VALIDATION_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    STORAGE = "STORAGE_ERROR"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE_ERROR"
    RATE_LIMIT = "RATE_LIMIT_ERROR"
    INTERNAL = "INTERNAL_ERROR"


class ErrorCode:
    """Specific error codes for better client handling."""

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_TREE = "INVALID_TREE"
    CONTENT_TOO_LONG = "CONTENT_TOO_LONG"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"

    # Storage errors
    STORAGE_FULL = "STORAGE_FULL"
    STORAGE_FAILURE = "STORAGE_FAILURE"

    # External service errors
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    INVALID_AI_RESPONSE = "INVALID_AI_RESPONSE"

    # Rate limiting
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Internal errors
    INTERNAL = "INTERNAL_ERROR"


# === Error Response Formatting ===


def format_error_response(
    category: str,
    code: str,
    detail: str,
    status_code: int,
    suggestions: list[str] | None = None,
    metadata: dict[str, Any] | None = None,
) -> JSONResponse:
    """Format a consistent error response."""
    content: dict[str, Any] = {
        "error": {
            "category": category,
            "code": code,
            "detail": detail,
        }
    }

    if suggestions:
        content["error"]["suggestions"] = suggestions

    if metadata:
        content["error"]["metadata"] = metadata

    return JSONResponse(status_code=status_code, content=content)


# === Exception Handlers ===


async def handle_validation_errors(request: Request, exc: Exception) -> JSONResponse:
    """Handle validation errors from Pydantic, FastAPI request parsing and domain checks."""
    logger.info(f"Validation error on {request.method} {request.url.path}", extra={"error": str(exc)})

    if isinstance(exc, (PydanticValidationError, RequestValidationError)):
        errors = []
        for error in exc.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            errors.append({"field": field, "message": error["msg"], "type": error["type"]})

        return format_error_response(
            category=ErrorCategory.VALIDATION,
            code=ErrorCode.INVALID_INPUT,
            detail="Invalid input data",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            metadata={"errors": errors},
        )

    return format_error_response(
        category=ErrorCategory.VALIDATION,
        code=ErrorCode.INVALID_TREE if isinstance(exc, InvalidTreeError) else ErrorCode.INVALID_INPUT,
        detail=str(exc),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def handle_not_found_errors(request: Request, exc: ResourceNotFoundError) -> JSONResponse:
    logger.info(f"Not found on {request.method} {request.url.path}: {exc}")
    return format_error_response(
        category=ErrorCategory.RESOURCE_NOT_FOUND,
        code=ErrorCode.NOT_FOUND,
        detail=str(exc),
        status_code=status.HTTP_404_NOT_FOUND,
        suggestions=["The requested resource does not exist"],
    )


async def handle_storage_errors(request: Request, exc: Exception) -> JSONResponse:
    """Handle quota rejections and storage backend failures."""
    if isinstance(exc, StorageQuotaExceededError):
        logger.warning(f"Storage quota exceeded on {request.method} {request.url.path}: {exc}")
        return format_error_response(
            category=ErrorCategory.STORAGE,
            code=ErrorCode.STORAGE_FULL,
            detail=str(exc),
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            suggestions=["Delete some saved items to free up space"],
            metadata={"used": exc.used, "limit": exc.limit},
        )

    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return format_error_response(
        category=ErrorCategory.STORAGE,
        code=ErrorCode.STORAGE_FAILURE,
        detail="Failed to access stored data",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# (error category, error code, HTTP status, detail, suggestion) per AI failure category
_AI_ERROR_RESPONSES: dict[AIRuntimeErrorCategory, tuple[str, str, int, str, str]] = {
    AIRuntimeErrorCategory.RATE_LIMIT_OR_QUOTA: (
        ErrorCategory.RATE_LIMIT,
        ErrorCode.RATE_LIMIT_EXCEEDED,
        status.HTTP_429_TOO_MANY_REQUESTS,
        "The AI provider is rate limiting requests",
        "Please wait a moment before trying again",
    ),
    AIRuntimeErrorCategory.TIMEOUT: (
        ErrorCategory.EXTERNAL_SERVICE,
        ErrorCode.TIMEOUT,
        status.HTTP_504_GATEWAY_TIMEOUT,
        "The AI provider took too long to respond",
        "Try again with shorter content",
    ),
    AIRuntimeErrorCategory.CONTENT_TOO_LONG: (
        ErrorCategory.VALIDATION,
        ErrorCode.CONTENT_TOO_LONG,
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        "The content is too long for the AI model",
        "Split the document and summarize it in parts",
    ),
    AIRuntimeErrorCategory.SCHEMA_VALIDATION: (
        ErrorCategory.EXTERNAL_SERVICE,
        ErrorCode.INVALID_AI_RESPONSE,
        status.HTTP_502_BAD_GATEWAY,
        "The AI provider returned content in an unexpected format",
        "Please try again",
    ),
    AIRuntimeErrorCategory.PROVIDER_FAILURE: (
        ErrorCategory.EXTERNAL_SERVICE,
        ErrorCode.SERVICE_UNAVAILABLE,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "AI service error",
        "The service is temporarily unavailable, please try again later",
    ),
}


async def handle_ai_runtime_errors(request: Request, exc: AIRuntimeError) -> JSONResponse:
    """Handle failures of the external AI provider."""
    logger.error(
        f"AI provider error on {request.method} {request.url.path}: {exc}",
        extra={"error_category": exc.category.value, "model": exc.model},
    )
    category, code, status_code, detail, suggestion = _AI_ERROR_RESPONSES.get(
        exc.category, _AI_ERROR_RESPONSES[AIRuntimeErrorCategory.PROVIDER_FAILURE]
    )
    return format_error_response(
        category=category,
        code=code,
        detail=detail,
        status_code=status_code,
        suggestions=[suggestion],
        metadata={"retryable": exc.retryable},
    )


async def handle_unexpected_errors(request: Request, exc: Exception) -> JSONResponse:
    """Answer any unhandled exception with a 500 that carries an id for the logs."""
    error_id = uuid4()
    log_error_context(request, exc, error_id)
    return format_error_response(
        category=ErrorCategory.INTERNAL,
        code=ErrorCode.INTERNAL,
        detail="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        suggestions=["If the problem persists, report it with the error ID"],
        metadata={"error_id": str(error_id)},
    )


# === Utility Functions ===


def log_error_context(request: Request, exc: Exception, error_id: UUID | None = None) -> None:
    """Log comprehensive error context for debugging."""
    context = {
        "error_id": str(error_id) if error_id else None,
        "method": request.method,
        "path": request.url.path,
        "query_params": dict(request.query_params),
        "client_host": request.client.host if request.client else "unknown",
        "error_type": type(exc).__name__,
        "error_message": str(exc),
    }

    logger.error("Request failed", extra=context, exc_info=exc)


__all__ = [
    "ErrorCategory",
    "ErrorCode",
    "format_error_response",
    "handle_ai_runtime_errors",
    "handle_not_found_errors",
    "handle_storage_errors",
    "handle_unexpected_errors",
    "handle_validation_errors",
    "log_error_context",
]
