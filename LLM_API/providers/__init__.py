"""
LLM Provider Implementations
"""

from typing import Optional

from ..base import CallModel
from ..data_classes import Provider


def create_model(
    provider,
    *,
    api_key: Optional[str] = None,
    model_name: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    max_retries: int = 0,
) -> CallModel:
    """Instantiate the provider implementation for ``provider``.

    Provider SDKs are imported on demand so only the selected one has to be
    installed.
    """

    provider = Provider.from_value(provider)
    if provider is Provider.OPENAI:
        from .openai import OpenAIModel as model_cls
    elif provider is Provider.ANTHROPIC:
        from .claude import ClaudeModel as model_cls
    else:
        from .gemini import GeminiModel as model_cls

    return model_cls(
        api_key=api_key,
        model_name=model_name,
        base_url=base_url,
        timeout=timeout,
        max_retries=max_retries,
    )


__all__ = ['create_model']
