import asyncio
from typing import Optional
from datetime import datetime


class LLMError(Exception):
    """Base exception for all LLM-related errors"""

    default_error_type = "general"

    def __init__(
        self,
        message: str,
        provider: str = "",
        error_type: Optional[str] = None,
        retry_after: Optional[int] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.error_type = error_type or self.default_error_type
        self.retry_after = retry_after
        self.original_error = original_error
        self.timestamp = datetime.now()

    def __str__(self):
        return f"[{self.provider}] {self.error_type}: {self.message}"


class LLMAPIError(LLMError):
    """API request failed"""
    default_error_type = "api_error"


class LLMAuthenticationError(LLMError):
    """Authentication failed (missing or invalid API key)"""
    default_error_type = "authentication"


class LLMRateLimitError(LLMError):
    """Rate limit exceeded"""
    default_error_type = "rate_limit"


class LLMValidationError(LLMError):
    """Request validation failed"""
    default_error_type = "validation"


class LLMTimeoutError(LLMError):
    """Request timed out"""
    default_error_type = "timeout"


class LLMModelNotFoundError(LLMError):
    """Specified model not found"""
    default_error_type = "model_not_found"


class LLMInsufficientQuotaError(LLMError):
    """Insufficient API quota"""
    default_error_type = "insufficient_quota"


# Errors that a retry cannot fix
NON_RETRYABLE_ERRORS = (
    LLMAuthenticationError,
    LLMValidationError,
    LLMModelNotFoundError,
    LLMInsufficientQuotaError,
)


def error_from_status(
    status_code: Optional[int],
    message: str,
    provider: str,
    original_error: Optional[Exception] = None,
    retry_after: Optional[int] = None,
) -> LLMError:
    """Map an HTTP status code returned by a provider to an LLMError subclass"""
    if status_code in (401, 403):
        error_cls = LLMAuthenticationError
    elif status_code == 404:
        error_cls = LLMModelNotFoundError
    elif status_code == 429:
        if "quota" in message.lower():
            error_cls = LLMInsufficientQuotaError
        else:
            error_cls = LLMRateLimitError
    elif status_code in (400, 422):
        error_cls = LLMValidationError
    elif status_code in (408, 504):
        error_cls = LLMTimeoutError
    else:
        error_cls = LLMAPIError
    return error_cls(
        message=message,
        provider=provider,
        retry_after=retry_after,
        original_error=original_error,
    )


def is_timeout(exc: BaseException) -> bool:
    """True for client-side timeouts raised outside the LLMError hierarchy"""
    return isinstance(exc, (asyncio.TimeoutError, TimeoutError, LLMTimeoutError))
