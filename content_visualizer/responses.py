"""Parse boundary between raw LLM text and typed stage results."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import MalformedResponseError
from .models import (
    ExtractionResult,
    PipelineStage,
    ScoringResult,
    StrategyResult,
    VisualSpecification,
)

LOGGER = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)

STAGE_RESULT_TYPES: Dict[PipelineStage, Type[BaseModel]] = {
    PipelineStage.EXTRACTION: ExtractionResult,
    PipelineStage.SCORING: ScoringResult,
    PipelineStage.STRATEGY: StrategyResult,
    PipelineStage.GENERATION: VisualSpecification,
}

_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n(?P<body>.*?)\n?```$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _CODE_FENCE.match(stripped)
    if match:
        return match.group("body").strip()
    return stripped


def load_json(text: str, stage: PipelineStage) -> Any:
    if not text or not text.strip():
        raise MalformedResponseError("Empty response", stage=stage)
    try:
        return json.loads(strip_code_fence(text))
    except json.JSONDecodeError as exc:
        LOGGER.debug("Failed to parse %s response: %s", stage.value, text)
        raise MalformedResponseError(
            f"Response is not valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            stage=stage,
            original_error=exc,
        ) from exc


def parse_result(text: str, stage: PipelineStage, model: Type[ResultT]) -> ResultT:
    payload = load_json(text, stage)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
            for error in exc.errors()
        )
        raise MalformedResponseError(
            f"Response does not match the {stage.value} result: {problems}",
            stage=stage,
            original_error=exc,
        ) from exc


def parse_stage_response(stage: PipelineStage, text: str) -> BaseModel:
    return parse_result(text, stage, STAGE_RESULT_TYPES[stage])


def parse_extraction(text: str) -> ExtractionResult:
    return parse_result(text, PipelineStage.EXTRACTION, ExtractionResult)


def parse_scoring(text: str) -> ScoringResult:
    return parse_result(text, PipelineStage.SCORING, ScoringResult)


def parse_strategy(text: str) -> StrategyResult:
    return parse_result(text, PipelineStage.STRATEGY, StrategyResult)


def parse_visual_specification(text: str) -> VisualSpecification:
    return parse_result(text, PipelineStage.GENERATION, VisualSpecification)
