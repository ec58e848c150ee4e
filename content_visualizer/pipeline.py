"""Sequential orchestration of the four content analysis stages."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from LLM_API.data_classes import CompletionRequest, CompletionResponse
from LLM_API.exceptions import LLMError, is_timeout

from .cache import content_hash
from .config import AIServiceConfig
from .errors import (
    InvalidPromptError,
    PipelineCancelledError,
    PipelineError,
    PipelineTimeoutError,
    ServiceFailureError,
)
from .models import (
    ContentInput,
    ExtractionResult,
    PipelineStage,
    PromptContext,
    PromptPair,
    ScoringResult,
    StrategyResult,
    VisualSpecification,
)
from .optimization import build_prompt_context, optimize_prompt, validate_prompt
from .prompts import (
    build_extraction_prompt,
    build_generation_prompt,
    build_scoring_prompt,
    build_strategy_prompt,
)
from .responses import parse_stage_response

LOGGER = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    SCORING = "scoring"
    STRATEGY_SELECTING = "strategy_selecting"
    GENERATING = "generating"
    COMPLETE = "complete"
    FAILED = "failed"


STAGE_STATES: Dict[PipelineStage, PipelineState] = {
    PipelineStage.EXTRACTION: PipelineState.EXTRACTING,
    PipelineStage.SCORING: PipelineState.SCORING,
    PipelineStage.STRATEGY: PipelineState.STRATEGY_SELECTING,
    PipelineStage.GENERATION: PipelineState.GENERATING,
}

_NEXT_STATE: Dict[PipelineState, PipelineState] = {
    PipelineState.IDLE: PipelineState.EXTRACTING,
    PipelineState.EXTRACTING: PipelineState.SCORING,
    PipelineState.SCORING: PipelineState.STRATEGY_SELECTING,
    PipelineState.STRATEGY_SELECTING: PipelineState.GENERATING,
    PipelineState.GENERATING: PipelineState.COMPLETE,
}

TERMINAL_STATES = frozenset({PipelineState.COMPLETE, PipelineState.FAILED})

TransitionListener = Callable[[PipelineState, PipelineState], None]


@dataclass(frozen=True)
class PipelineResult:
    """Every stage result of one completed run."""

    content: ContentInput
    extraction: ExtractionResult
    scoring: ScoringResult
    strategy: StrategyResult
    visual_specification: VisualSpecification
    content_hash: str
    analysis_id: str = field(default_factory=lambda: f"analysis-{uuid.uuid4().hex[:12]}")
    created_at: datetime = field(default_factory=datetime.now)
    usage: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.analysis_id,
            "originalContent": self.content.to_dict(),
            "extractedData": self.extraction.to_payload(),
            "scoring": self.scoring.to_payload(),
            "strategy": self.strategy.to_payload(),
            "visualSpecification": self.visual_specification.to_payload(),
            "contentHash": self.content_hash,
            "createdAt": self.created_at.isoformat(),
        }


class AnalysisPipeline:
    """One run of extraction → scoring → strategy → generation.

    ``llm_client`` is any object with an async ``generate_content(request)``
    returning a :class:`CompletionResponse` (see ``LLM_API.CallModel``). An
    instance executes a single run; create a new one per content input.
    """

    def __init__(
        self,
        llm_client,
        config: Optional[AIServiceConfig] = None,
        *,
        on_transition: Optional[TransitionListener] = None,
    ) -> None:
        self.llm_client = llm_client
        self.config = config or AIServiceConfig()
        self.on_transition = on_transition
        self.state = PipelineState.IDLE
        self.current_stage: Optional[PipelineStage] = None
        self.failure: Optional[PipelineError] = None
        self.history: List[Tuple[PipelineState, PipelineState]] = []
        self.usage: Dict[str, int] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def run(self, content: ContentInput) -> PipelineResult:
        if self.state is not PipelineState.IDLE:
            raise RuntimeError(f"Pipeline already used (state: {self.state.value})")

        LOGGER.info("Starting content analysis (%d characters)", len(content.text))
        try:
            extraction = await self._run_stage(
                PipelineStage.EXTRACTION,
                lambda: build_extraction_prompt(content),
                build_prompt_context(content),
            )
            scoring = await self._run_stage(
                PipelineStage.SCORING,
                lambda: build_scoring_prompt(content, extraction),
                build_prompt_context(content),
            )
            # Later stages also know the scored complexity
            scored_context = build_prompt_context(content, scoring)
            strategy = await self._run_stage(
                PipelineStage.STRATEGY,
                lambda: build_strategy_prompt(content, scoring),
                scored_context,
            )
            visual_specification = await self._run_stage(
                PipelineStage.GENERATION,
                lambda: build_generation_prompt(content, strategy, extraction),
                scored_context,
            )
        except PipelineError as exc:
            self._fail(exc)
            raise
        except asyncio.CancelledError:
            self._fail(
                PipelineCancelledError(
                    "Pipeline cancelled while awaiting the LLM service",
                    stage=self.current_stage,
                )
            )
            raise
        except Exception as exc:
            self._fail(
                PipelineError(
                    f"Unexpected {type(exc).__name__}: {exc}",
                    stage=self.current_stage,
                    original_error=exc,
                )
            )
            raise

        self._transition(PipelineState.COMPLETE)
        self.current_stage = None
        LOGGER.info("Content analysis complete (%s tokens)", self.usage.get("total_tokens", "?"))
        return PipelineResult(
            content=content,
            extraction=extraction,
            scoring=scoring,
            strategy=strategy,
            visual_specification=visual_specification,
            content_hash=content_hash(content),
            usage=dict(self.usage),
        )

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    # ------------------------------------------------------------------
    # Stage execution
    # ------------------------------------------------------------------
    async def _run_stage(
        self,
        stage: PipelineStage,
        build: Callable[[], PromptPair],
        context: PromptContext,
    ):
        self._transition(STAGE_STATES[stage])
        self.current_stage = stage

        prompt = build()
        prompt = prompt.with_user(optimize_prompt(prompt.user, context))
        if not validate_prompt(prompt.combined()):
            raise InvalidPromptError(
                "Prompt failed pre-flight validation; request not sent", stage=stage
            )

        settings = self.config.stage_settings(stage)
        request = CompletionRequest(
            prompt=prompt.user,
            system=prompt.system,
            model_name=self.config.model_name,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )
        LOGGER.debug(
            "Sending %s request (temperature=%s, max_tokens=%s)",
            stage.value, settings.temperature, settings.max_tokens,
        )
        response = await self._call_client(stage, request)
        result = parse_stage_response(stage, response.text)
        LOGGER.info("Stage %s finished", stage.value)
        return result

    async def _call_client(
        self, stage: PipelineStage, request: CompletionRequest
    ) -> CompletionResponse:
        try:
            response = await self.llm_client.generate_content(request)
        except LLMError as exc:
            if is_timeout(exc):
                raise PipelineTimeoutError(exc.message, stage=stage, original_error=exc) from exc
            raise ServiceFailureError(str(exc), stage=stage, original_error=exc) from exc
        except Exception as exc:
            # Transport errors from clients outside the LLM_API hierarchy
            if is_timeout(exc):
                raise PipelineTimeoutError(
                    str(exc) or "LLM client timed out", stage=stage, original_error=exc
                ) from exc
            raise ServiceFailureError(
                f"{type(exc).__name__}: {exc}", stage=stage, original_error=exc
            ) from exc

        if response is None:
            raise ServiceFailureError("LLM client returned no response", stage=stage)
        if not response.success:
            if response.is_timeout:
                raise PipelineTimeoutError(response.error, stage=stage)
            raise ServiceFailureError(response.error, stage=stage)

        for key, value in (response.usage or {}).items():
            self.usage[key] = self.usage.get(key, 0) + value
        return response

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------
    def _transition(self, target: PipelineState) -> None:
        previous = self.state
        if target is not PipelineState.FAILED and _NEXT_STATE.get(previous) is not target:
            raise RuntimeError(f"Illegal transition {previous.value} -> {target.value}")
        if target is PipelineState.FAILED and previous in TERMINAL_STATES:
            raise RuntimeError(f"Illegal transition {previous.value} -> {target.value}")

        self.state = target
        self.history.append((previous, target))
        LOGGER.debug("Pipeline state %s -> %s", previous.value, target.value)
        if self.on_transition is not None:
            self.on_transition(previous, target)

    def _fail(self, error: PipelineError) -> None:
        if error.stage is None:
            error.stage = self.current_stage
        self.failure = error
        LOGGER.warning("Content analysis failed: %s", error)
        if not self.is_terminal:
            self._transition(PipelineState.FAILED)


async def run_pipeline(
    content: ContentInput,
    llm_client,
    config: Optional[AIServiceConfig] = None,
    *,
    on_transition: Optional[TransitionListener] = None,
) -> PipelineResult:
    """Run a fresh pipeline for ``content``."""

    pipeline = AnalysisPipeline(llm_client, config, on_transition=on_transition)
    return await pipeline.run(content)
