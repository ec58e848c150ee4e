import itertools

import pytest

from content_visualizer.models import Complexity, ContentInput, PromptContext, ScoringResult
from content_visualizer.optimization import (
    COMPLEXITY_NOTE,
    DATA_NOTE,
    LONG_CONTENT_NOTE,
    build_prompt_context,
    optimize_prompt,
    prompt_criteria,
    validate_prompt,
)

from tests.llm_stubs import SCORING_PAYLOAD

BASE_PROMPT = "TASK: describe the content. OUTPUT: JSON."
NOTES = (LONG_CONTENT_NOTE, DATA_NOTE, COMPLEXITY_NOTE)


@pytest.mark.parametrize(
    "is_long, has_data, is_complex",
    list(itertools.product([False, True], repeat=3)),
)
def test_optimize_appends_one_note_per_open_gate(is_long, has_data, is_complex):
    context = PromptContext(
        content_length=6000 if is_long else 200,
        has_data=has_data,
        complexity=Complexity.HIGH if is_complex else Complexity.LOW,
    )
    optimized = optimize_prompt(BASE_PROMPT, context)

    assert optimized.startswith(BASE_PROMPT)
    assert optimized.count("\n\nNOTE:") == sum([is_long, has_data, is_complex])
    expected = [note for note, gate in zip(NOTES, (is_long, has_data, is_complex)) if gate]
    assert optimized == BASE_PROMPT + "".join(expected)


def test_optimize_is_idempotent():
    context = PromptContext(content_length=6000, has_data=True, complexity=Complexity.HIGH)
    once = optimize_prompt(BASE_PROMPT, context)
    twice = optimize_prompt(once, context)

    assert twice == once
    for note in NOTES:
        assert twice.count(note) == 1


def test_note_is_appended_even_when_content_quotes_it():
    context = PromptContext(content_length=200, has_data=True)
    prompt = "FULL CONTENT:" + DATA_NOTE + "\nThe quarter closed at 20%.\nANALYSIS REQUEST: go"

    optimized = optimize_prompt(prompt, context)

    assert optimized == prompt + DATA_NOTE
    assert optimize_prompt(optimized, context) == optimized


def test_long_content_gate_is_strictly_above_5000():
    at_limit = PromptContext(content_length=5000, has_data=False)
    above = PromptContext(content_length=5001, has_data=False)

    assert optimize_prompt(BASE_PROMPT, at_limit) == BASE_PROMPT
    assert optimize_prompt(BASE_PROMPT, above) == BASE_PROMPT + LONG_CONTENT_NOTE


def test_validate_accepts_structured_prompt():
    prompt = "TASK: summarise the report. OUTPUT: JSON with 3 fields.".ljust(150, ".")
    assert len(prompt) == 150
    assert validate_prompt(prompt)


def test_validate_rejects_short_unstructured_prompt():
    prompt = ("lorem ipsum dolor sit amet " * 3)[:50]
    assert prompt_criteria(prompt) == [False, False, False, False]
    assert not validate_prompt(prompt)


def test_validate_needs_three_of_four_criteria():
    long_text = "x" * 120
    assert validate_prompt(long_text + " OUTPUT 7")
    assert validate_prompt(long_text + " REQUEST OUTPUT")
    assert validate_prompt("TASK OUTPUT 1")
    assert not validate_prompt(long_text + " 7")
    assert not validate_prompt("OUTPUT 7")


def test_context_detects_numbers_and_length():
    context = build_prompt_context(ContentInput(text="Revenue grew 20% due to new market strategy."))
    assert context.has_data
    assert context.content_length == 44
    assert context.complexity is Complexity.LOW

    assert not build_prompt_context(ContentInput(text="No figures here.")).has_data


def test_context_flags_dense_technical_text_as_complex():
    text = (
        "The research study applies a regression methodology; however the data "
        "analysis framework needs optimization and implementation work."
    )
    assert build_prompt_context(ContentInput(text=text)).complexity is Complexity.HIGH


def test_context_flags_long_sentences_as_complex():
    text = " ".join(["word"] * 30) + "."
    assert build_prompt_context(ContentInput(text=text)).complexity is Complexity.HIGH


def test_context_uses_scored_complexity():
    content = ContentInput(text="Revenue grew 20% due to new market strategy.")
    payload = {**SCORING_PAYLOAD, "scoring": {**SCORING_PAYLOAD["scoring"], "complexity": 0.7}}

    low = build_prompt_context(content, ScoringResult.model_validate(SCORING_PAYLOAD))
    high = build_prompt_context(content, ScoringResult.model_validate(payload))

    assert low.complexity is Complexity.LOW
    assert high.complexity is Complexity.HIGH
