"""Entry point used by UI handlers to analyse content."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from LLM_API.providers import create_model

from .cache import AnalysisCache, content_hash
from .config import AIServiceConfig
from .models import ContentInput
from .pipeline import AnalysisPipeline, PipelineResult, TransitionListener

LOGGER = logging.getLogger(__name__)


class ContentAnalysisService:
    """Owns the LLM client and cache; runs a fresh pipeline per request."""

    def __init__(
        self,
        config: AIServiceConfig,
        *,
        llm_client=None,
        cache: Optional[AnalysisCache] = None,
        on_transition: Optional[TransitionListener] = None,
    ) -> None:
        self.config = config
        self.llm_client = llm_client if llm_client is not None else self._create_client(config)
        if cache is None and config.enable_caching:
            cache = AnalysisCache()
        self.cache = cache
        self.on_transition = on_transition

    @classmethod
    def from_env(cls, **kwargs) -> "ContentAnalysisService":
        return cls(AIServiceConfig.from_env(), **kwargs)

    @staticmethod
    def _create_client(config: AIServiceConfig):
        return create_model(
            config.provider,
            api_key=config.api_key,
            model_name=config.model_name,
            base_url=config.endpoint,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )

    def create_pipeline(self) -> AnalysisPipeline:
        return AnalysisPipeline(
            self.llm_client, self.config, on_transition=self.on_transition
        )

    async def analyze(self, content: ContentInput) -> PipelineResult:
        key = content_hash(content)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                LOGGER.info("Using cached analysis %s", cached.analysis_id)
                return cached

        result = await self.create_pipeline().run(content)

        if self.cache is not None:
            self.cache.put(key, result)
        return result

    def analyze_sync(self, content: ContentInput) -> PipelineResult:
        """Blocking wrapper for callers without a running event loop."""

        return asyncio.run(self.analyze(content))
