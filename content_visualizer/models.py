"""Data models for content inputs, prompts and the results of each pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PipelineStage(str, Enum):
    """The four steps of the content analysis pipeline, in execution order."""

    EXTRACTION = "extraction"
    SCORING = "scoring"
    STRATEGY = "strategy"
    GENERATION = "generation"


class Complexity(str, Enum):
    LOW = "low"
    HIGH = "high"


# ---------------------------------------------------------------------------
# Inputs and prompts
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ContentMetadata:
    """Optional descriptive fields supplied with the content."""

    title: Optional[str] = None
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            key: value
            for key, value in (("title", self.title), ("type", self.type))
            if value is not None
        }


@dataclass(frozen=True, slots=True)
class ContentInput:
    """Raw text submitted for analysis."""

    text: str
    metadata: ContentMetadata = field(default_factory=ContentMetadata)

    def __post_init__(self) -> None:
        if not isinstance(self.text, str) or not self.text.strip():
            raise ValueError("ContentInput.text must be a non-empty string")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentInput":
        raw_metadata = data.get("metadata") or {}
        return cls(
            text=data.get("text") or data.get("content") or "",
            metadata=ContentMetadata(
                title=raw_metadata.get("title"),
                type=raw_metadata.get("type"),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "metadata": self.metadata.to_dict()}


@dataclass(frozen=True, slots=True)
class PromptPair:
    """System instruction plus user instruction sent together to an LLM."""

    system: str
    user: str

    def combined(self) -> str:
        return f"{self.system}\n\n{self.user}"

    def with_user(self, user: str) -> "PromptPair":
        return PromptPair(system=self.system, user=user)


@dataclass(frozen=True, slots=True)
class PromptContext:
    """Lightweight heuristics about the content, consumed by the optimizer."""

    content_length: int
    has_data: bool
    complexity: Complexity = Complexity.LOW


# ---------------------------------------------------------------------------
# Stage results (validated at the parse boundary)
# ---------------------------------------------------------------------------

Score = Annotated[float, Field(ge=0.0, le=1.0)]


def _normalize_enum_name(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper().replace("-", "_").replace(" ", "_")
    return value


class _ResultModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    def to_payload(self) -> Dict[str, Any]:
        """JSON-compatible dict using the wire (camelCase) field names."""

        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class DataPoint(_ResultModel):
    label: str
    value: Union[int, float, str]
    unit: Optional[str] = None


class Relationship(_ResultModel):
    source: str = Field(alias="from")
    target: str = Field(alias="to")
    kind: str


class ExtractionContext(_ResultModel):
    audience_level: str = Field(alias="audienceLevel")
    purpose: str
    domain: str


class ExtractionResult(_ResultModel):
    """Structured information pulled out of the content by the first stage."""

    key_points: Tuple[str, ...] = Field(alias="keyPoints", min_length=5, max_length=10)
    data_points: Tuple[DataPoint, ...] = Field(alias="dataPoints")
    relationships: Tuple[Relationship, ...]
    structure: Union[str, Dict[str, Any], List[Any]]
    context: ExtractionContext


class DimensionScores(_ResultModel):
    complexity: Score
    data_richness: Score = Field(alias="dataRichness")
    narrative_flow: Score = Field(alias="narrativeFlow")
    temporal_elements: Score = Field(alias="temporalElements")
    quantitative_data: Score = Field(alias="quantitativeData")
    conceptual_depth: Score = Field(alias="conceptualDepth")
    actionability: Score
    audience_level: Score = Field(alias="audienceLevel")

    def as_dict(self) -> Dict[str, float]:
        return self.model_dump(by_alias=True)


SCORING_DIMENSIONS: Tuple[str, ...] = tuple(
    info.alias or name for name, info in DimensionScores.model_fields.items()
)


class ApproachRecommendation(_ResultModel):
    approach: str
    confidence: Score
    reasoning: Optional[str] = None


class ScoringResult(_ResultModel):
    """Eight visualization dimensions plus recommended approaches."""

    scoring: DimensionScores
    recommendations: Tuple[ApproachRecommendation, ...]
    best_practices: Tuple[str, ...] = Field(default=(), alias="bestPractices")

    @model_validator(mode="before")
    @classmethod
    def _wrap_flat_scores(cls, data: Any) -> Any:
        # Accept the dimensions at the top level as well as under "scoring"
        if isinstance(data, dict) and "scoring" not in data:
            dimensions = {key: data[key] for key in SCORING_DIMENSIONS if key in data}
            if dimensions:
                rest = {key: value for key, value in data.items() if key not in dimensions}
                return {**rest, "scoring": dimensions}
        return data

    @property
    def complexity(self) -> float:
        return self.scoring.complexity


class FormatType(str, Enum):
    SHORT = "SHORT"
    LONG = "LONG"
    HYBRID = "HYBRID"


class VisualApproach(str, Enum):
    BULLET_LIST = "BULLET_LIST"
    TIMELINE = "TIMELINE"
    CHART = "CHART"
    INFOGRAPHIC = "INFOGRAPHIC"
    PROCESS_FLOW = "PROCESS_FLOW"
    DATA_STORY = "DATA_STORY"
    COMPARISON = "COMPARISON"


class StrategyOption(_ResultModel):
    format_type: FormatType = Field(alias="format")
    visual_approach: VisualApproach = Field(alias="visualApproach")
    confidence: Score
    reasoning: str
    estimated_sections: int = Field(alias="estimatedSections", ge=1)

    @field_validator("format_type", "visual_approach", mode="before")
    @classmethod
    def _normalize_enums(cls, value: Any) -> Any:
        return _normalize_enum_name(value)

    @field_validator("reasoning", mode="before")
    @classmethod
    def _join_reasoning(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return " ".join(str(item) for item in value)
        return value


class StrategyResult(_ResultModel):
    """Up to three presentation strategies ranked by confidence."""

    strategies: Tuple[StrategyOption, ...] = Field(min_length=1, max_length=3)

    @model_validator(mode="before")
    @classmethod
    def _wrap_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"strategies": data}
        return data

    @field_validator("strategies")
    @classmethod
    def _rank_by_confidence(
        cls, value: Tuple[StrategyOption, ...]
    ) -> Tuple[StrategyOption, ...]:
        return tuple(sorted(value, key=lambda option: option.confidence, reverse=True))

    @property
    def best(self) -> StrategyOption:
        return self.strategies[0]


class ElementType(str, Enum):
    TEXT = "TEXT"
    CHART = "CHART"
    SHAPE = "SHAPE"
    IMAGE = "IMAGE"
    LIST = "LIST"


class VisualElement(_ResultModel):
    element_type: ElementType = Field(alias="type")
    layout: Dict[str, Any]
    styling: Dict[str, Any]
    hierarchy: Any
    accessibility: Dict[str, Any]
    id: Optional[str] = None
    content: Optional[Any] = None

    @field_validator("element_type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        return _normalize_enum_name(value)


class VisualSpecification(_ResultModel):
    """Terminal artifact handed to the rendering layer."""

    elements: Tuple[VisualElement, ...] = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _wrap_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"elements": data}
        return data
