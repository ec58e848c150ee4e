"""Abstract base class that normalises the provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .data_classes import CompletionRequest, CompletionResponse, ProviderConfig
from .decorators import log_request, with_retry, with_timeout
from .exceptions import LLMError, LLMValidationError


class CallModel(ABC):
    """Abstract base class for all LLM providers."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: int = 0,
        retry_delay: float = 1.0,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self.retry_delay = retry_delay
        self.client = None
        self.provider_config = self._get_provider_config()
        self.setup_client()

    @abstractmethod
    def setup_client(self) -> None:
        """Initialise the provider client."""

    @abstractmethod
    def _get_provider_config(self) -> ProviderConfig:
        """Return provider specific configuration metadata."""

    @abstractmethod
    async def _send(self, request: CompletionRequest) -> CompletionResponse:
        """Send one request to the provider, raising LLMError on failure."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @log_request
    async def generate_content(self, request: CompletionRequest) -> CompletionResponse:
        """Send ``request`` with timeout and retry applied.

        Client failures are reported on the returned response (``error`` and
        ``error_type``) rather than raised. Cancellation is never swallowed.
        """

        model_used = request.model_name or self.model_name
        try:
            self._validate_request(request)
            send = with_timeout(self.timeout or 0, provider=self.get_provider_name())(self._send)
            send = with_retry(
                max_attempts=self.max_retries + 1,
                delay=self.retry_delay,
            )(send)
            return await send(request)
        except LLMError as e:
            return CompletionResponse(
                text="",
                model_used=model_used,
                error=str(e),
                error_type=e.error_type,
            )

    # ------------------------------------------------------------------
    # Utility helpers
    # ------------------------------------------------------------------
    def get_provider_name(self) -> str:
        """Return the provider name."""

        return self.provider_config.provider_name

    def _validate_request(self, request: CompletionRequest) -> None:
        if not request.prompt:
            raise LLMValidationError(
                message="Request must have a prompt",
                provider=self.get_provider_name(),
            )
        limit = self.provider_config.max_tokens_limit
        if request.max_tokens and limit and request.max_tokens > limit:
            raise LLMValidationError(
                message=f"max_tokens exceeds limit: {limit}",
                provider=self.get_provider_name(),
            )
