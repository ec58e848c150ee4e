"""Service configuration and per-stage request settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv

from LLM_API.data_classes import Provider, default_model_for

from .models import PipelineStage


@dataclass(frozen=True)
class StageSettings:
    temperature: float
    max_tokens: int


DEFAULT_STAGE_SETTINGS: Dict[PipelineStage, StageSettings] = {
    PipelineStage.EXTRACTION: StageSettings(temperature=0.3, max_tokens=2000),
    PipelineStage.SCORING: StageSettings(temperature=0.2, max_tokens=1500),
    PipelineStage.STRATEGY: StageSettings(temperature=0.4, max_tokens=2000),
    PipelineStage.GENERATION: StageSettings(temperature=0.6, max_tokens=3000),
}

API_KEY_VARIABLES: Dict[Provider, tuple] = {
    Provider.OPENAI: ("OPENAI_API_KEY",),
    Provider.ANTHROPIC: ("ANTHROPIC_API_KEY",),
    Provider.GOOGLE: ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}


@dataclass(frozen=True)
class AIServiceConfig:
    """Everything the pipeline needs to know about the LLM service it calls."""

    provider: Provider = Provider.OPENAI
    api_key: Optional[str] = None
    endpoint: Optional[str] = None
    model: Optional[str] = None
    max_tokens: int = 4000
    temperature: Optional[float] = None
    timeout: float = 30.0
    max_retries: int = 2
    enable_caching: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "provider", Provider.from_value(self.provider))
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")
        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be within [0, 2], got {self.temperature}")
        if self.timeout < 0:
            raise ValueError(f"timeout must not be negative, got {self.timeout}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must not be negative, got {self.max_retries}")

    @property
    def model_name(self) -> str:
        return self.model or default_model_for(self.provider)

    def stage_settings(self, stage: PipelineStage) -> StageSettings:
        """Stage defaults, with the global temperature override and token cap applied."""

        defaults = DEFAULT_STAGE_SETTINGS[stage]
        return StageSettings(
            temperature=(
                self.temperature if self.temperature is not None else defaults.temperature
            ),
            max_tokens=min(defaults.max_tokens, self.max_tokens),
        )

    def with_overrides(self, **changes) -> "AIServiceConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        dotenv: bool = True,
    ) -> "AIServiceConfig":
        """Build a config from ``AI_*`` variables (and a ``.env`` file when present)."""

        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        provider = Provider.from_value(environ.get("AI_PRIMARY_SERVICE") or "openai")
        api_key = next(
            (environ[name] for name in API_KEY_VARIABLES[provider] if environ.get(name)),
            None,
        )
        timeout_ms = _parse_number(environ, "AI_TIMEOUT", float, 30000.0)

        return cls(
            provider=provider,
            api_key=api_key,
            endpoint=environ.get("AI_ENDPOINT") or None,
            model=environ.get("AI_MODEL") or None,
            max_tokens=_parse_number(environ, "AI_MAX_TOKENS", int, 4000),
            temperature=_parse_number(environ, "AI_TEMPERATURE", float, None),
            timeout=timeout_ms / 1000.0,
            max_retries=_parse_number(environ, "AI_MAX_RETRIES", int, 2),
            enable_caching=_parse_flag(environ.get("ENABLE_RESPONSE_CACHING")),
        )


def _parse_number(environ: Mapping[str, str], name: str, kind, default):
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _parse_flag(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "yes", "on"}
