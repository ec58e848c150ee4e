"""
LLM API Package - Unified async completion interface for multiple LLM providers
"""

from .base import CallModel
from .data_classes import (
    CompletionRequest, CompletionResponse,
    Provider, ProviderConfig,
    SERVICE_ENDPOINTS, default_model_for
)
from .exceptions import (
    LLMError, LLMAPIError, LLMValidationError,
    LLMRateLimitError, LLMAuthenticationError, LLMTimeoutError,
    LLMModelNotFoundError, LLMInsufficientQuotaError
)
from .providers import create_model

__version__ = "1.1.0"
__all__ = [
    # Base
    'CallModel', 'create_model',
    # Data Classes
    'CompletionRequest', 'CompletionResponse',
    'Provider', 'ProviderConfig',
    'SERVICE_ENDPOINTS', 'default_model_for',
    # Exceptions
    'LLMError', 'LLMAPIError', 'LLMValidationError',
    'LLMRateLimitError', 'LLMAuthenticationError', 'LLMTimeoutError',
    'LLMModelNotFoundError', 'LLMInsufficientQuotaError',
]
