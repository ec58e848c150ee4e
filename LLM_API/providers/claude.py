from typing import Optional, Dict, Any

import anthropic

from ..converters import ClaudeConverter
from ..data_classes import (
    CompletionRequest, CompletionResponse,
    Provider, ProviderConfig, SERVICE_ENDPOINTS, default_model_for
)
from ..exceptions import LLMAPIError, LLMTimeoutError
from ._base_provider import BaseProvider, retry_after_seconds


class ClaudeModel(BaseProvider):
    """Anthropic Messages API implementation of CallModel"""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None, **kwargs):
        super().__init__(
            api_key=api_key,
            model_name=model_name or default_model_for(Provider.ANTHROPIC),
            **kwargs
        )

    def _get_provider_config(self) -> ProviderConfig:
        """Get Claude provider configuration"""
        reference = SERVICE_ENDPOINTS[Provider.ANTHROPIC]
        return ProviderConfig(
            provider_name="Claude",
            model_name=self.model_name,
            endpoint=self.base_url or reference["endpoint"],
            supports_json_mode=False,
            max_tokens_limit=200000,
        )

    def setup_client(self):
        """Setup Anthropic client"""
        api_key = self._require_api_key("ANTHROPIC_API_KEY")
        client_kwargs: Dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if self.base_url:
            client_kwargs["base_url"] = self.base_url
        if self.timeout:
            client_kwargs["timeout"] = self.timeout
        self.client = anthropic.AsyncAnthropic(**client_kwargs)

    async def _send(self, request: CompletionRequest) -> CompletionResponse:
        params = ClaudeConverter.convert_request(request, self.model_name)
        try:
            response = await self.client.messages.create(**params)
        except anthropic.APITimeoutError as e:
            raise LLMTimeoutError(message=str(e), provider=self.get_provider_name(), original_error=e) from e
        except anthropic.APIStatusError as e:
            raise self._translate_status_error(e, e.status_code, retry_after_seconds(e)) from e
        except anthropic.APIError as e:
            raise LLMAPIError(message=str(e), provider=self.get_provider_name(), original_error=e) from e

        # Extract text from response
        text_content = ""
        for content in response.content:
            if content.type == "text":
                text_content += content.text

        usage = None
        if hasattr(response, 'usage'):
            input_tokens = getattr(response.usage, 'input_tokens', 0) or 0
            output_tokens = getattr(response.usage, 'output_tokens', 0) or 0
            usage = {
                "prompt_tokens": input_tokens,
                "completion_tokens": output_tokens,
                "total_tokens": input_tokens + output_tokens
            }

        return CompletionResponse(
            text=text_content,
            model_used=params["model"],
            usage=usage,
            raw_response=response
        )
