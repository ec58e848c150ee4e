from typing import Optional, Dict, Any

import openai
from openai import AsyncOpenAI

from ..converters import OpenAIConverter
from ..data_classes import (
    CompletionRequest, CompletionResponse,
    Provider, ProviderConfig, SERVICE_ENDPOINTS, default_model_for
)
from ..exceptions import LLMAPIError, LLMTimeoutError
from ._base_provider import BaseProvider, retry_after_seconds


class OpenAIModel(BaseProvider):
    """OpenAI Chat Completions implementation of CallModel"""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None, **kwargs):
        super().__init__(
            api_key=api_key,
            model_name=model_name or default_model_for(Provider.OPENAI),
            **kwargs
        )

    def _get_provider_config(self) -> ProviderConfig:
        reference = SERVICE_ENDPOINTS[Provider.OPENAI]
        return ProviderConfig(
            provider_name="OpenAI",
            model_name=self.model_name,
            endpoint=self.base_url or reference["endpoint"],
            supports_json_mode=True,
            max_tokens_limit=128000,
        )

    def setup_client(self):
        api_key = self._require_api_key("OPENAI_API_KEY")
        client_kwargs: Dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if self.base_url:
            client_kwargs["base_url"] = self.base_url
        if self.timeout:
            client_kwargs["timeout"] = self.timeout
        self.client = AsyncOpenAI(**client_kwargs)

    async def _send(self, request: CompletionRequest) -> CompletionResponse:
        params = OpenAIConverter.convert_request(
            request, self.model_name, json_mode=self.provider_config.supports_json_mode
        )
        try:
            response = await self.client.chat.completions.create(**params)
        except openai.APITimeoutError as e:
            raise LLMTimeoutError(message=str(e), provider=self.get_provider_name(), original_error=e) from e
        except openai.APIStatusError as e:
            raise self._translate_status_error(e, e.status_code, retry_after_seconds(e)) from e
        except openai.APIError as e:
            raise LLMAPIError(message=str(e), provider=self.get_provider_name(), original_error=e) from e

        choices = getattr(response, "choices", None) or []
        text = ""
        if choices and choices[0].message is not None:
            text = choices[0].message.content or ""

        usage = None
        if getattr(response, "usage", None) is not None:
            usage = {
                "prompt_tokens": getattr(response.usage, "prompt_tokens", 0) or 0,
                "completion_tokens": getattr(response.usage, "completion_tokens", 0) or 0,
                "total_tokens": getattr(response.usage, "total_tokens", 0) or 0,
            }

        return CompletionResponse(
            text=text,
            model_used=getattr(response, "model", None) or params["model"],
            usage=usage,
            raw_response=response
        )
