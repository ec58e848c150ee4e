from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum


# ========== Enums ==========

class Provider(Enum):
    """Supported LLM providers"""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"

    @classmethod
    def from_value(cls, value: "str | Provider") -> "Provider":
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(
            f"Unknown provider '{value}'. Expected one of: "
            + ", ".join(member.value for member in cls)
        )


# ========== Request / Response ==========

@dataclass
class CompletionRequest:
    """A system/user prompt pair sent to a provider"""
    prompt: str = ""
    system: Optional[str] = None
    model_name: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    json_output: bool = True

    def __post_init__(self):
        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be within [0, 2], got {self.temperature}")
        if self.max_tokens is not None and self.max_tokens < 1:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")

    def to_dict(self) -> Dict[str, Any]:
        """Dictionary form without unset fields (used for logging and payloads)"""
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass
class CompletionResponse:
    """Text returned by a provider, or the error that prevented it"""
    text: str = ""
    model_used: Optional[str] = None
    usage: Optional[Dict[str, int]] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    raw_response: Optional[Any] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def is_timeout(self) -> bool:
        return self.error_type == "timeout"


# ========== Provider metadata ==========

@dataclass
class ProviderConfig:
    """Provider specific limits and defaults"""
    provider_name: str = ""
    model_name: str = ""
    endpoint: str = ""
    supports_json_mode: bool = True
    max_tokens_limit: Optional[int] = None


# ========== Static endpoint reference ==========

SERVICE_ENDPOINTS: Dict[Provider, Dict[str, Any]] = {
    Provider.OPENAI: {
        "endpoint": "https://api.openai.com/v1/chat/completions",
        "default_model": "gpt-4-turbo-preview",
        "models": {
            "gpt-4-turbo-preview": "Most capable for complex analysis",
            "gpt-4": "Reliable for content understanding",
            "gpt-3.5-turbo": "Cost-effective for basic analysis",
        },
    },
    Provider.ANTHROPIC: {
        "endpoint": "https://api.anthropic.com/v1/messages",
        "default_model": "claude-3-sonnet-20240229",
        "models": {
            "claude-3-opus-20240229": "Highest reasoning capability",
            "claude-3-sonnet-20240229": "Balanced performance/cost",
            "claude-3-haiku-20240307": "Fast and efficient",
        },
    },
    Provider.GOOGLE: {
        "endpoint": "https://generativelanguage.googleapis.com/v1beta/models/gemini-pro:generateContent",
        "default_model": "gemini-pro",
        "models": {
            "gemini-pro": "Text analysis and generation",
            "gemini-pro-vision": "Multimodal analysis (text + images)",
        },
    },
}


def default_model_for(provider: Provider) -> str:
    return SERVICE_ENDPOINTS[provider]["default_model"]
