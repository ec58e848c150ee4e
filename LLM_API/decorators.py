import asyncio
import functools
import logging
from typing import Awaitable, Callable, TypeVar

from .exceptions import (
    LLMAPIError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
    NON_RETRYABLE_ERRORS,
)

T = TypeVar('T')

LOGGER = logging.getLogger(__name__)


def with_retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: tuple = (LLMAPIError, LLMRateLimitError)
):
    """
    Retry decorator with exponential backoff for coroutine functions

    Args:
        max_attempts: Maximum number of attempts (1 disables retrying)
        delay: Initial delay between retries (seconds)
        backoff: Multiplier for delay after each retry
        exceptions: Tuple of exceptions that trigger another attempt
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            current_delay = delay
            attempts = max(1, max_attempts)

            for attempt in range(1, attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except NON_RETRYABLE_ERRORS:
                    raise
                except exceptions as e:
                    if attempt == attempts:
                        if attempts == 1:
                            raise
                        raise LLMAPIError(
                            message=f"Failed after {attempts} attempts: {getattr(e, 'message', e)}",
                            provider=getattr(e, "provider", ""),
                            error_type="retry_exhausted",
                            original_error=e
                        ) from e

                    wait = current_delay
                    retry_after = getattr(e, "retry_after", None)
                    if retry_after:
                        wait = max(wait, float(retry_after))
                    LOGGER.info(
                        "%s failed (attempt %d/%d), retrying in %.1fs: %s",
                        func.__name__, attempt, attempts, wait, e,
                    )
                    await asyncio.sleep(wait)
                    current_delay *= backoff

            raise AssertionError("unreachable")

        return wrapper
    return decorator


def with_timeout(seconds: float, provider: str = ""):
    """
    Timeout decorator for coroutine functions

    Raises LLMTimeoutError when the wrapped call does not finish in time.
    A non-positive value disables the limit.
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            if not seconds or seconds <= 0:
                return await func(*args, **kwargs)
            try:
                return await asyncio.wait_for(func(*args, **kwargs), timeout=seconds)
            except asyncio.TimeoutError as e:
                raise LLMTimeoutError(
                    message=f"No response within {seconds:g}s",
                    provider=provider,
                    original_error=e
                ) from e

        return wrapper
    return decorator


def log_request(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Log API requests for debugging"""
    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> T:
        provider = args[0].__class__.__name__ if args else "Unknown"
        LOGGER.debug("[%s] Calling %s", provider, func.__name__)

        try:
            result = await func(*args, **kwargs)
        except LLMError as e:
            LOGGER.debug("[%s] %s failed: %s", provider, func.__name__, e)
            raise
        error = getattr(result, "error", None)
        if error:
            LOGGER.debug("[%s] %s returned error: %s", provider, func.__name__, error)
        else:
            LOGGER.debug("[%s] %s succeeded", provider, func.__name__)
        return result

    return wrapper
