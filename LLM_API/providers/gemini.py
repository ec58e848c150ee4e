from typing import Optional, Dict, Any

import httpx
from google import genai
from google.genai import errors, types

from ..converters import GeminiConverter
from ..data_classes import (
    CompletionRequest, CompletionResponse,
    Provider, ProviderConfig, SERVICE_ENDPOINTS, default_model_for
)
from ..exceptions import LLMAPIError, LLMTimeoutError
from ._base_provider import BaseProvider


class GeminiModel(BaseProvider):
    """Gemini API implementation of CallModel"""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None, **kwargs):
        super().__init__(
            api_key=api_key,
            model_name=model_name or default_model_for(Provider.GOOGLE),
            **kwargs
        )

    def _get_provider_config(self) -> ProviderConfig:
        """Get Gemini provider configuration"""
        reference = SERVICE_ENDPOINTS[Provider.GOOGLE]
        return ProviderConfig(
            provider_name="Gemini",
            model_name=self.model_name,
            endpoint=self.base_url or reference["endpoint"],
            supports_json_mode=True,
            max_tokens_limit=8192,
        )

    def setup_client(self):
        """Setup Gemini client"""
        api_key = self._require_api_key("GEMINI_API_KEY")
        http_options: Dict[str, Any] = {}
        if self.base_url:
            http_options["base_url"] = self.base_url
        if self.timeout:
            # HttpOptions.timeout is expressed in milliseconds
            http_options["timeout"] = int(self.timeout * 1000)
        if http_options:
            self.client = genai.Client(api_key=api_key, http_options=types.HttpOptions(**http_options))
        else:
            self.client = genai.Client(api_key=api_key)

    async def _send(self, request: CompletionRequest) -> CompletionResponse:
        model = request.model_name or self.model_name
        config = types.GenerateContentConfig(
            **GeminiConverter.convert_config(request, json_mode=self.provider_config.supports_json_mode)
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=request.prompt,
                config=config,
            )
        except httpx.TimeoutException as e:
            raise LLMTimeoutError(message=str(e), provider=self.get_provider_name(), original_error=e) from e
        except errors.APIError as e:
            raise self._translate_status_error(e, getattr(e, "code", None)) from e
        except httpx.HTTPError as e:
            raise LLMAPIError(message=str(e), provider=self.get_provider_name(), original_error=e) from e

        usage = None
        metadata = getattr(response, "usage_metadata", None)
        if metadata is not None:
            usage = {
                "prompt_tokens": getattr(metadata, "prompt_token_count", 0) or 0,
                "completion_tokens": getattr(metadata, "candidates_token_count", 0) or 0,
                "total_tokens": getattr(metadata, "total_token_count", 0) or 0,
            }

        return CompletionResponse(
            text=getattr(response, 'text', '') or "",
            model_used=model,
            usage=usage,
            raw_response=response
        )
