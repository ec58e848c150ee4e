"""Prompt post-processing: context heuristics, advisory notes and pre-flight checks."""

from __future__ import annotations

import re
from typing import List, Optional

from .models import Complexity, ContentInput, PromptContext, ScoringResult

LONG_CONTENT_THRESHOLD = 5000
HIGH_COMPLEXITY_SCORE = 0.7
MIN_PROMPT_LENGTH = 100
MIN_CRITERIA_MET = 3

LONG_CONTENT_NOTE = (
    "\n\nNOTE: This is long-form content. Focus on hierarchical organization "
    "and progressive disclosure."
)
DATA_NOTE = (
    "\n\nNOTE: Content contains numerical data. Prioritize data visualization "
    "opportunities."
)
COMPLEXITY_NOTE = (
    "\n\nNOTE: Complex content detected. Consider multi-page breakdown and clear "
    "information architecture."
)

OUTPUT_MARKER = "OUTPUT"
TASK_MARKERS = ("TASK", "REQUEST")

COMPLEX_INDICATORS = (
    "however", "furthermore", "nevertheless", "consequently", "therefore",
    "moreover", "additionally", "specifically", "particularly", "essentially",
    "methodology", "analysis", "implementation", "optimization", "framework",
)
TECHNICAL_TERMS = (
    "algorithm", "data", "analysis", "research", "study", "methodology",
    "framework", "implementation", "optimization", "correlation", "regression",
)

_DIGIT = re.compile(r"\d")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def _is_complex_text(text: str) -> bool:
    words = text.split()
    sentences = [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]
    avg_words = len(words) / max(len(sentences), 1)
    lowered = text.lower()
    indicator_hits = sum(1 for word in COMPLEX_INDICATORS if word in lowered)
    technical_hits = sum(1 for term in TECHNICAL_TERMS if term in lowered)
    return (
        len(words) > 1000
        or avg_words > 25
        or indicator_hits > 5
        or technical_hits > 5
    )


def build_prompt_context(
    content: ContentInput, scoring: Optional[ScoringResult] = None
) -> PromptContext:
    """Derive optimizer hints from the content and, when known, its scoring."""

    complex_content = _is_complex_text(content.text)
    if scoring is not None and scoring.complexity >= HIGH_COMPLEXITY_SCORE:
        complex_content = True
    return PromptContext(
        content_length=len(content.text),
        has_data=bool(_DIGIT.search(content.text)),
        complexity=Complexity.HIGH if complex_content else Complexity.LOW,
    )


def advisory_notes(context: PromptContext) -> List[str]:
    """Notes whose gate is open for ``context``, in their fixed order."""

    notes = []
    if context.content_length > LONG_CONTENT_THRESHOLD:
        notes.append(LONG_CONTENT_NOTE)
    if context.has_data:
        notes.append(DATA_NOTE)
    if context.complexity == Complexity.HIGH:
        notes.append(COMPLEXITY_NOTE)
    return notes


def optimize_prompt(prompt: str, context: PromptContext) -> str:
    """Return ``prompt`` with the applicable advisory notes appended once each."""

    suffix = "".join(advisory_notes(context))
    # Only the tail counts: the prompt body may quote the content verbatim
    if prompt.endswith(suffix):
        return prompt
    return prompt + suffix


def prompt_criteria(prompt: str) -> List[bool]:
    return [
        len(prompt) > MIN_PROMPT_LENGTH,
        OUTPUT_MARKER in prompt,
        any(marker in prompt for marker in TASK_MARKERS),
        bool(_DIGIT.search(prompt)),
    ]


def validate_prompt(prompt: str) -> bool:
    """True when at least three of the four structural criteria hold."""

    return sum(prompt_criteria(prompt)) >= MIN_CRITERIA_MET
