from typing import Optional
from ..base import CallModel
from ..exceptions import LLMAuthenticationError, LLMError, error_from_status


class BaseProvider(CallModel):
    """Base class with common provider functionality"""

    def _require_api_key(self, setting_name: str) -> str:
        """Return the configured API key or fail with an authentication error"""
        if not self.api_key:
            raise LLMAuthenticationError(
                message=f"API key required. Set {setting_name} or pass api_key parameter",
                provider=self.get_provider_name(),
                error_type="missing_api_key"
            )
        return self.api_key

    def _translate_status_error(
        self,
        exc: Exception,
        status_code: Optional[int],
        retry_after: Optional[int] = None,
    ) -> LLMError:
        message = getattr(exc, "message", None) or str(exc)
        return error_from_status(
            status_code,
            message,
            provider=self.get_provider_name(),
            original_error=exc,
            retry_after=retry_after,
        )


def retry_after_seconds(exc: Exception) -> Optional[int]:
    """Read a ``retry-after`` header from an SDK status error, if present"""
    response = getattr(exc, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    value = headers.get("retry-after")
    try:
        return int(float(value)) if value is not None else None
    except (TypeError, ValueError):
        return None
