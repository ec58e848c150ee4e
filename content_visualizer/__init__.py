"""Content-to-presentation analysis pipeline."""

from .cache import AnalysisCache, content_hash
from .config import AIServiceConfig, StageSettings, DEFAULT_STAGE_SETTINGS
from .domain import infer_domain
from .errors import (
    ErrorKind,
    InvalidPromptError,
    MalformedResponseError,
    PipelineCancelledError,
    PipelineError,
    PipelineTimeoutError,
    ServiceFailureError,
)
from .models import (
    Complexity,
    ContentInput,
    ContentMetadata,
    ExtractionResult,
    PipelineStage,
    PromptContext,
    PromptPair,
    ScoringResult,
    StrategyResult,
    VisualSpecification,
)
from .optimization import build_prompt_context, optimize_prompt, validate_prompt
from .pipeline import AnalysisPipeline, PipelineResult, PipelineState, run_pipeline
from .prompts import (
    build_extraction_prompt,
    build_generation_prompt,
    build_scoring_prompt,
    build_strategy_prompt,
)
from .service import ContentAnalysisService

__all__ = [
    "AIServiceConfig",
    "AnalysisCache",
    "AnalysisPipeline",
    "Complexity",
    "ContentAnalysisService",
    "ContentInput",
    "ContentMetadata",
    "DEFAULT_STAGE_SETTINGS",
    "ErrorKind",
    "ExtractionResult",
    "InvalidPromptError",
    "MalformedResponseError",
    "PipelineCancelledError",
    "PipelineError",
    "PipelineResult",
    "PipelineStage",
    "PipelineState",
    "PipelineTimeoutError",
    "PromptContext",
    "PromptPair",
    "ScoringResult",
    "ServiceFailureError",
    "StageSettings",
    "StrategyResult",
    "VisualSpecification",
    "build_extraction_prompt",
    "build_generation_prompt",
    "build_prompt_context",
    "build_scoring_prompt",
    "build_strategy_prompt",
    "content_hash",
    "infer_domain",
    "optimize_prompt",
    "run_pipeline",
    "validate_prompt",
]
