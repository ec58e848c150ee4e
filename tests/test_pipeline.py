import asyncio

import pytest

import content_visualizer.pipeline as pipeline_module
from content_visualizer.config import AIServiceConfig
from content_visualizer.errors import (
    ErrorKind,
    InvalidPromptError,
    MalformedResponseError,
    PipelineTimeoutError,
    ServiceFailureError,
)
from content_visualizer.models import (
    ContentInput,
    ContentMetadata,
    ExtractionResult,
    PipelineStage,
    ScoringResult,
    StrategyResult,
    VisualApproach,
    VisualSpecification,
)
from content_visualizer.optimization import DATA_NOTE
from content_visualizer.pipeline import AnalysisPipeline, PipelineState, run_pipeline
from LLM_API.data_classes import CompletionResponse
from LLM_API.exceptions import LLMAuthenticationError, LLMTimeoutError

from tests.llm_stubs import MultiStageStubLLM

REVENUE_CONTENT = ContentInput(
    text="Revenue grew 20% due to new market strategy.",
    metadata=ContentMetadata(title="Q3 update"),
)

HAPPY_PATH = [
    (PipelineState.IDLE, PipelineState.EXTRACTING),
    (PipelineState.EXTRACTING, PipelineState.SCORING),
    (PipelineState.SCORING, PipelineState.STRATEGY_SELECTING),
    (PipelineState.STRATEGY_SELECTING, PipelineState.GENERATING),
    (PipelineState.GENERATING, PipelineState.COMPLETE),
]


def test_pipeline_runs_all_four_stages_in_order():
    llm = MultiStageStubLLM(usage={"total_tokens": 10})
    pipeline = AnalysisPipeline(llm)

    result = asyncio.run(pipeline.run(REVENUE_CONTENT))

    assert llm.stages_called == ["extraction", "scoring", "strategy", "generation"]
    assert pipeline.state is PipelineState.COMPLETE
    assert pipeline.history == HAPPY_PATH
    assert pipeline.failure is None

    assert isinstance(result.extraction, ExtractionResult)
    assert isinstance(result.scoring, ScoringResult)
    assert isinstance(result.strategy, StrategyResult)
    assert isinstance(result.visual_specification, VisualSpecification)
    assert result.strategy.best.visual_approach is VisualApproach.CHART
    assert len(result.visual_specification.elements) >= 1
    assert result.usage == {"total_tokens": 40}
    assert result.analysis_id.startswith("analysis-")
    assert result.to_dict()["originalContent"]["metadata"] == {"title": "Q3 update"}


def test_each_stage_prompt_carries_the_expected_context():
    llm = MultiStageStubLLM()
    asyncio.run(run_pipeline(REVENUE_CONTENT, llm))

    extraction = llm.requests_for("extraction")[0]
    assert REVENUE_CONTENT.text in extraction.prompt
    assert extraction.prompt.endswith(DATA_NOTE)

    scoring = llm.requests_for("scoring")[0]
    assert "20%" in scoring.prompt
    assert '"keyPoints"' in scoring.prompt

    strategy = llm.requests_for("strategy")[0]
    assert "- Estimated reading time: 1 minutes" in strategy.prompt
    assert "- Domain: business" in strategy.prompt

    generation = llm.requests_for("generation")[0]
    assert '"visualApproach": "CHART"' in generation.prompt


def test_stage_requests_use_stage_settings():
    llm = MultiStageStubLLM()
    config = AIServiceConfig(model="gpt-4", max_tokens=1800)
    asyncio.run(run_pipeline(REVENUE_CONTENT, llm, config))

    settings = [(r.temperature, r.max_tokens, r.model_name) for r in llm.requests]
    assert settings == [
        (0.3, 1800, "gpt-4"),
        (0.2, 1500, "gpt-4"),
        (0.4, 1800, "gpt-4"),
        (0.6, 1800, "gpt-4"),
    ]


def test_malformed_scoring_stops_before_strategy_prompt(monkeypatch):
    built = []
    original = pipeline_module.build_strategy_prompt

    def spy(*args, **kwargs):
        built.append(args)
        return original(*args, **kwargs)

    monkeypatch.setattr(pipeline_module, "build_strategy_prompt", spy)
    llm = MultiStageStubLLM({"scoring": "{not json"})
    pipeline = AnalysisPipeline(llm)

    with pytest.raises(MalformedResponseError) as excinfo:
        asyncio.run(pipeline.run(REVENUE_CONTENT))

    assert excinfo.value.stage is PipelineStage.SCORING
    assert pipeline.state is PipelineState.FAILED
    assert pipeline.failure is excinfo.value
    assert pipeline.failure.kind is ErrorKind.MALFORMED_RESPONSE
    assert pipeline.history[-1] == (PipelineState.SCORING, PipelineState.FAILED)
    assert built == []
    assert llm.stages_called == ["extraction", "scoring"]


def test_invalid_prompt_is_never_sent(monkeypatch):
    monkeypatch.setattr(pipeline_module, "validate_prompt", lambda prompt: False)
    llm = MultiStageStubLLM()
    pipeline = AnalysisPipeline(llm)

    with pytest.raises(InvalidPromptError) as excinfo:
        asyncio.run(pipeline.run(REVENUE_CONTENT))

    assert excinfo.value.kind is ErrorKind.INVALID_PROMPT
    assert excinfo.value.stage is PipelineStage.EXTRACTION
    assert llm.requests == []
    assert pipeline.state is PipelineState.FAILED


def test_error_response_is_a_service_failure():
    failure = CompletionResponse(error="[OpenAI] api_error: boom", error_type="api_error")
    llm = MultiStageStubLLM({"strategy": failure})
    pipeline = AnalysisPipeline(llm)

    with pytest.raises(ServiceFailureError) as excinfo:
        asyncio.run(pipeline.run(REVENUE_CONTENT))

    assert excinfo.value.kind is ErrorKind.SERVICE_FAILURE
    assert excinfo.value.stage is PipelineStage.STRATEGY
    assert "generation" not in llm.stages_called


def test_timeout_response_is_a_timeout():
    failure = CompletionResponse(error="no response", error_type="timeout")
    llm = MultiStageStubLLM({"extraction": failure})

    with pytest.raises(PipelineTimeoutError) as excinfo:
        asyncio.run(run_pipeline(REVENUE_CONTENT, llm))

    assert excinfo.value.kind is ErrorKind.TIMEOUT
    assert llm.stages_called == ["extraction"]


def test_network_error_from_client_is_a_service_failure():
    llm = MultiStageStubLLM({"scoring": ConnectionError("connection reset")})
    pipeline = AnalysisPipeline(llm)

    with pytest.raises(ServiceFailureError) as excinfo:
        asyncio.run(pipeline.run(REVENUE_CONTENT))

    error = excinfo.value
    assert not isinstance(error, PipelineTimeoutError)
    assert error.kind is ErrorKind.SERVICE_FAILURE
    assert error.stage is PipelineStage.SCORING
    assert isinstance(error.original_error, ConnectionError)
    assert "connection reset" in error.message
    assert pipeline.state is PipelineState.FAILED
    assert pipeline.failure is error
    assert llm.stages_called == ["extraction", "scoring"]


def test_builtin_timeout_from_client_is_a_timeout():
    llm = MultiStageStubLLM({"strategy": TimeoutError("read timed out")})
    pipeline = AnalysisPipeline(llm)

    with pytest.raises(PipelineTimeoutError) as excinfo:
        asyncio.run(pipeline.run(REVENUE_CONTENT))

    assert excinfo.value.kind is ErrorKind.TIMEOUT
    assert excinfo.value.stage is PipelineStage.STRATEGY
    assert pipeline.state is PipelineState.FAILED


def test_unexpected_error_still_fails_the_pipeline(monkeypatch):
    def broken_parser(stage, text):
        raise KeyError("elements")

    monkeypatch.setattr(pipeline_module, "parse_stage_response", broken_parser)
    pipeline = AnalysisPipeline(MultiStageStubLLM())

    with pytest.raises(KeyError):
        asyncio.run(pipeline.run(REVENUE_CONTENT))

    assert pipeline.state is PipelineState.FAILED
    assert pipeline.is_terminal
    assert pipeline.failure.stage is PipelineStage.EXTRACTION
    assert isinstance(pipeline.failure.original_error, KeyError)


def test_raised_client_errors_are_translated():
    llm = MultiStageStubLLM({"generation": LLMTimeoutError("slow", provider="OpenAI")})
    with pytest.raises(PipelineTimeoutError):
        asyncio.run(run_pipeline(REVENUE_CONTENT, llm))

    llm = MultiStageStubLLM({"scoring": LLMAuthenticationError("bad key", provider="OpenAI")})
    with pytest.raises(ServiceFailureError) as excinfo:
        asyncio.run(run_pipeline(REVENUE_CONTENT, llm))
    assert not isinstance(excinfo.value, PipelineTimeoutError)
    assert isinstance(excinfo.value.original_error, LLMAuthenticationError)


def test_cancellation_fails_the_pipeline_without_later_stages():
    llm = MultiStageStubLLM(block_stages=("scoring",))
    pipeline = AnalysisPipeline(llm)

    async def scenario():
        task = asyncio.create_task(pipeline.run(REVENUE_CONTENT))
        await llm.blocked.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert pipeline.state is PipelineState.FAILED
    assert pipeline.failure.kind is ErrorKind.CANCELLED
    assert pipeline.failure.stage is PipelineStage.SCORING
    assert llm.stages_called == ["extraction", "scoring"]


def test_transition_listener_sees_every_state_change():
    seen = []
    llm = MultiStageStubLLM({"generation": "[]"})

    with pytest.raises(MalformedResponseError):
        asyncio.run(
            run_pipeline(
                REVENUE_CONTENT, llm, on_transition=lambda old, new: seen.append(new)
            )
        )

    assert seen == [
        PipelineState.EXTRACTING,
        PipelineState.SCORING,
        PipelineState.STRATEGY_SELECTING,
        PipelineState.GENERATING,
        PipelineState.FAILED,
    ]


def test_pipeline_instance_runs_once():
    pipeline = AnalysisPipeline(MultiStageStubLLM())
    asyncio.run(pipeline.run(REVENUE_CONTENT))

    with pytest.raises(RuntimeError):
        asyncio.run(pipeline.run(REVENUE_CONTENT))
    assert pipeline.state is PipelineState.COMPLETE
