"""Prompt templates for the four content analysis stages.

Every builder is a pure function of its arguments: identical inputs always
produce an identical :class:`PromptPair`.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict

from .domain import infer_domain
from .models import (
    ContentInput,
    ExtractionResult,
    PromptPair,
    ScoringResult,
    StrategyResult,
)

SCORING_EXCERPT_CHARS = 1000
GENERATION_EXCERPT_CHARS = 500
READING_CHARS_PER_MINUTE = 1000
ELLIPSIS = "..."


EXTRACTION_SYSTEM_PROMPT = """You are an expert content analyst specializing in extracting structured information from text for visualization purposes.

TASK: Analyze the provided content and extract key information that will inform visualization decisions.

EXTRACTION REQUIREMENTS:
1. KEY POINTS: Identify 5-10 most important concepts, findings, or statements
2. DATA POINTS: Extract all numerical data (percentages, currencies, dates, metrics, ratios)
3. RELATIONSHIPS: Identify connections between concepts (causal, temporal, comparative)
4. STRUCTURE: Analyze information hierarchy and flow
5. CONTEXT: Determine audience level, purpose, and domain

OUTPUT FORMAT: Return structured JSON with extracted information:
{"keyPoints": [string], "dataPoints": [{"label": string, "value": number or string, "unit": string}], "relationships": [{"from": string, "to": string, "kind": string}], "structure": string or object, "context": {"audienceLevel": string, "purpose": string, "domain": string}}

QUALITY CRITERIA:
- Preserve original meaning and context
- Prioritize actionable and significant information
- Maintain data accuracy and relationships
- Consider visualization potential of each element"""


SCORING_SYSTEM_PROMPT = """You are a data visualization expert who evaluates content to recommend optimal visual presentation formats.

SCORING DIMENSIONS (rate 0.0-1.0):

1. COMPLEXITY (0=simple, 1=complex)
   - Concept difficulty and interconnections
   - Technical depth and abstraction level
   - Cognitive load requirements

2. DATA_RICHNESS (0=text-heavy, 1=data-heavy)
   - Numerical content density
   - Statistical information presence
   - Quantifiable metrics availability

3. NARRATIVE_FLOW (0=fragmented, 1=clear story)
   - Logical progression and structure
   - Cause-effect relationships
   - Sequential development

4. TEMPORAL_ELEMENTS (0=static, 1=time-based)
   - Chronological information
   - Historical progression
   - Timeline-worthy events

5. QUANTITATIVE_DATA (0=qualitative, 1=quantitative)
   - Measurable data points
   - Statistical analysis potential
   - Chart-worthy information

6. CONCEPTUAL_DEPTH (0=surface, 1=deep)
   - Analysis requirements
   - Expert knowledge needed
   - Detailed exploration potential

7. ACTIONABILITY (0=informational, 1=decision-focused)
   - Action items and recommendations
   - Decision-making support
   - Implementation guidance

8. AUDIENCE_LEVEL (0=general, 1=expert)
   - Technical sophistication required
   - Domain expertise assumptions
   - Specialized knowledge needs

RECOMMENDATIONS: Based on scoring, suggest optimal visualization approaches with confidence ratings.

OUTPUT FORMAT: Return JSON:
{"scoring": {"complexity": number, "dataRichness": number, "narrativeFlow": number, "temporalElements": number, "quantitativeData": number, "conceptualDepth": number, "actionability": number, "audienceLevel": number}, "recommendations": [{"approach": string, "confidence": number, "reasoning": string}], "bestPractices": [string]}"""


STRATEGY_SYSTEM_PROMPT = """You are a presentation strategy expert who determines optimal format and approach for content visualization.

STRATEGY FRAMEWORK:

FORMAT TYPES:
- SHORT (1 page): Focused, high-impact, executive summary style
- LONG (3-8 pages): Comprehensive, detailed exploration
- HYBRID (2-4 pages): Executive summary + detailed breakdowns

VISUAL APPROACHES:
1. BULLET_LIST: Scannable action items with icons
2. TIMELINE: Chronological progression with milestones
3. CHART: Data visualization with insights
4. INFOGRAPHIC: Mixed visual elements with hierarchy
5. PROCESS_FLOW: Step-by-step procedures
6. DATA_STORY: Narrative with integrated visualizations
7. COMPARISON: Side-by-side analysis

SELECTION CRITERIA:
- Cognitive load management (Miller's 7+/-2 rule)
- Information architecture principles
- Audience attention spans
- Content complexity matching
- Visual processing efficiency

OUTPUT: Ranked list of presentation approaches with confidence scores, reasoning, and implementation details, as JSON:
{"strategies": [{"format": "SHORT" | "LONG" | "HYBRID", "visualApproach": string, "confidence": number, "reasoning": string, "estimatedSections": integer}]}"""


GENERATION_SYSTEM_PROMPT = """You are a visual design expert who creates detailed specifications for presentation elements.

ELEMENT TYPES:
- TEXT: Headings, body text, captions, labels
- CHART: Bar, line, pie, scatter, timeline charts
- SHAPE: Boxes, circles, arrows, connectors
- IMAGE: Photos, illustrations, icons, diagrams
- LIST: Bullet points, numbered lists, checklists

DESIGN SPECIFICATIONS:
1. LAYOUT: Position, size, alignment, spacing
2. STYLING: Colors, fonts, borders, shadows
3. HIERARCHY: Visual weight, emphasis, grouping
4. ACCESSIBILITY: Contrast, readability, alt text
5. RESPONSIVENESS: Mobile, tablet, desktop layouts

DESIGN PRINCIPLES:
- Visual hierarchy and flow
- Cognitive load optimization
- Brand consistency
- Accessibility compliance (WCAG AA)
- Cross-platform compatibility

OUTPUT: Detailed element specifications with positioning, styling, and content details, as JSON:
{"elements": [{"id": string, "type": "TEXT" | "CHART" | "SHAPE" | "IMAGE" | "LIST", "content": any, "layout": object, "styling": object, "hierarchy": object, "accessibility": object}]}"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def excerpt(text: str, limit: int) -> str:
    """First ``limit`` characters of ``text``, marked with an ellipsis when cut."""

    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def reading_time_minutes(text: str) -> int:
    return math.ceil(len(text) / READING_CHARS_PER_MINUTE)


def _to_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_extraction_prompt(content: ContentInput) -> PromptPair:
    metadata = content.metadata
    sections = [
        "CONTENT TO ANALYZE:",
        f"Title: {metadata.title or 'Untitled'}",
        f"Type: {metadata.type or 'text'}",
        f"Length: {len(content.text)} characters",
        "",
        "FULL CONTENT:",
        content.text,
        "",
        "ANALYSIS REQUEST:",
        "Please extract structured information from this content following the system "
        "requirements. Focus on elements that would be most effective when visualized.",
    ]
    return PromptPair(system=EXTRACTION_SYSTEM_PROMPT, user="\n".join(sections))


def build_scoring_prompt(content: ContentInput, extraction: ExtractionResult) -> PromptPair:
    sections = [
        "CONTENT ANALYSIS RESULTS:",
        _to_json(extraction.to_payload()),
        "",
        "ORIGINAL CONTENT SAMPLE:",
        excerpt(content.text, SCORING_EXCERPT_CHARS),
        "",
        "SCORING REQUEST:",
        "Please score this content across all 8 dimensions and recommend visualization "
        "approaches. Provide detailed reasoning for each score and explain how it "
        "influences visualization decisions.",
    ]
    return PromptPair(system=SCORING_SYSTEM_PROMPT, user="\n".join(sections))


def build_strategy_prompt(content: ContentInput, scoring: ScoringResult) -> PromptPair:
    sections = [
        "CONTENT SCORING RESULTS:",
        _to_json(scoring.to_payload()),
        "",
        "CONTENT CHARACTERISTICS:",
        f"- Length: {len(content.text)} characters",
        f"- Estimated reading time: {reading_time_minutes(content.text)} minutes",
        f"- Domain: {infer_domain(content.text)}",
        "",
        "STRATEGY REQUEST:",
        "Based on the scoring analysis, recommend the top 3 presentation strategies. "
        "For each recommendation, provide:",
        "1. Confidence score (0-1)",
        "2. Detailed reasoning",
        "3. Estimated pages/sections",
        "4. Visual approach priorities",
        "5. Implementation considerations",
    ]
    return PromptPair(system=STRATEGY_SYSTEM_PROMPT, user="\n".join(sections))


def build_generation_prompt(
    content: ContentInput,
    strategy: StrategyResult,
    extraction: ExtractionResult,
) -> PromptPair:
    sections = [
        "SELECTED STRATEGY:",
        _to_json(strategy.to_payload()),
        "",
        "EXTRACTED DATA:",
        _to_json(extraction.to_payload()),
        "",
        "CONTENT CONTEXT:",
        excerpt(content.text, GENERATION_EXCERPT_CHARS),
        "",
        "GENERATION REQUEST:",
        "Create detailed visual element specifications for the selected presentation "
        "strategy. Include:",
        "1. Element hierarchy and layout",
        "2. Specific content for each element",
        "3. Styling and positioning details",
        "4. Interactive behaviors",
        "5. Accessibility considerations",
        "",
        "Focus on creating production-ready specifications that can be directly implemented.",
    ]
    return PromptPair(system=GENERATION_SYSTEM_PROMPT, user="\n".join(sections))
