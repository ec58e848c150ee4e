"""Failures surfaced by the content analysis pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_PROMPT = "invalid-prompt"
    MALFORMED_RESPONSE = "malformed-response"
    SERVICE_FAILURE = "service-failure"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


class PipelineError(Exception):
    """Base error carrying the failing stage and the error kind."""

    kind: ErrorKind = ErrorKind.SERVICE_FAILURE

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        if kind is not None:
            self.kind = kind
        self.original_error = original_error

    @property
    def stage_name(self) -> str:
        return str(getattr(self.stage, "value", self.stage) or "pipeline")

    def __str__(self) -> str:
        return f"[{self.stage_name}] {self.kind.value}: {self.message}"


class InvalidPromptError(PipelineError):
    """A built prompt failed the pre-flight check; no request was sent."""

    kind = ErrorKind.INVALID_PROMPT


class MalformedResponseError(PipelineError):
    """The LLM returned text that is not a valid result for the stage."""

    kind = ErrorKind.MALFORMED_RESPONSE


class ServiceFailureError(PipelineError):
    """The LLM client reported a network, authentication or provider error."""

    kind = ErrorKind.SERVICE_FAILURE


class PipelineTimeoutError(ServiceFailureError):
    kind = ErrorKind.TIMEOUT


class PipelineCancelledError(PipelineError):
    """Recorded on the pipeline when the caller cancels a running stage."""

    kind = ErrorKind.CANCELLED
