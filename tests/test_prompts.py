import json

from content_visualizer.models import (
    ContentInput,
    ContentMetadata,
    ExtractionResult,
    ScoringResult,
    StrategyResult,
)
from content_visualizer.optimization import validate_prompt
from content_visualizer.prompts import (
    EXTRACTION_SYSTEM_PROMPT,
    SCORING_SYSTEM_PROMPT,
    build_extraction_prompt,
    build_generation_prompt,
    build_scoring_prompt,
    build_strategy_prompt,
    excerpt,
    reading_time_minutes,
)

from tests.llm_stubs import EXTRACTION_PAYLOAD, SCORING_PAYLOAD, STRATEGY_PAYLOAD

REVENUE_TEXT = "Revenue grew 20% due to new market strategy."


def _extraction():
    return ExtractionResult.model_validate(EXTRACTION_PAYLOAD)


def _scoring():
    return ScoringResult.model_validate(SCORING_PAYLOAD)


def _strategy():
    return StrategyResult.model_validate(STRATEGY_PAYLOAD)


def test_extraction_prompt_embeds_full_content_verbatim():
    text = "Line one\n\n  indented — ünïcode {braces} 100%\n" + "x" * 6000
    prompt = build_extraction_prompt(ContentInput(text=text))

    assert prompt.system == EXTRACTION_SYSTEM_PROMPT
    assert text in prompt.user
    assert f"Length: {len(text)} characters" in prompt.user


def test_extraction_prompt_uses_metadata_or_defaults():
    untitled = build_extraction_prompt(ContentInput(text=REVENUE_TEXT))
    assert "Title: Untitled" in untitled.user
    assert "Type: text" in untitled.user

    titled = build_extraction_prompt(
        ContentInput(text=REVENUE_TEXT, metadata=ContentMetadata(title="Q3", type="report"))
    )
    assert "Title: Q3" in titled.user
    assert "Type: report" in titled.user


def test_scoring_prompt_truncates_content_to_1000_characters():
    text = "a" * 1000 + "Z" * 500
    prompt = build_scoring_prompt(ContentInput(text=text), _extraction())

    assert prompt.system == SCORING_SYSTEM_PROMPT
    assert "a" * 1000 + "..." in prompt.user
    assert "ZZ" not in prompt.user
    assert json.dumps(EXTRACTION_PAYLOAD["keyPoints"][0]) in prompt.user


def test_scoring_prompt_keeps_short_content_whole():
    prompt = build_scoring_prompt(ContentInput(text=REVENUE_TEXT), _extraction())

    assert REVENUE_TEXT + "\n" in prompt.user
    assert REVENUE_TEXT + "..." not in prompt.user
    assert "20%" in prompt.user


def test_strategy_prompt_lists_content_characteristics():
    prompt = build_strategy_prompt(ContentInput(text=REVENUE_TEXT), _scoring())

    assert f"- Length: {len(REVENUE_TEXT)} characters" in prompt.user
    assert "- Estimated reading time: 1 minutes" in prompt.user
    assert "- Domain: business" in prompt.user
    assert '"dataRichness": 0.6' in prompt.user


def test_reading_time_rounds_up_per_thousand_characters():
    assert reading_time_minutes("x") == 1
    assert reading_time_minutes("x" * 1000) == 1
    assert reading_time_minutes("x" * 2001) == 3


def test_generation_prompt_truncates_content_to_500_characters():
    text = "b" * 500 + "Z" * 100
    prompt = build_generation_prompt(ContentInput(text=text), _strategy(), _extraction())

    assert "b" * 500 + "..." in prompt.user
    assert "ZZ" not in prompt.user
    assert '"visualApproach": "CHART"' in prompt.user
    assert '"keyPoints"' in prompt.user


def test_excerpt_marks_only_truncated_text():
    assert excerpt("short", 10) == "short"
    assert excerpt("x" * 10, 10) == "x" * 10
    assert excerpt("x" * 11, 10) == "x" * 10 + "..."


def test_builders_are_deterministic():
    content = ContentInput(text=REVENUE_TEXT)
    assert build_extraction_prompt(content) == build_extraction_prompt(content)
    assert build_scoring_prompt(content, _extraction()) == build_scoring_prompt(
        content, _extraction()
    )
    assert build_strategy_prompt(content, _scoring()) == build_strategy_prompt(
        content, _scoring()
    )


def test_built_prompts_pass_preflight_validation():
    content = ContentInput(text=REVENUE_TEXT)
    prompts = [
        build_extraction_prompt(content),
        build_scoring_prompt(content, _extraction()),
        build_strategy_prompt(content, _scoring()),
        build_generation_prompt(content, _strategy(), _extraction()),
    ]
    for prompt in prompts:
        assert validate_prompt(prompt.combined())
