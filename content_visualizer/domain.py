"""Keyword based classification of content into a coarse topic label."""

from __future__ import annotations

from typing import Dict, Tuple

GENERAL_DOMAIN = "general"

# Declaration order breaks ties between equally scored domains.
DOMAIN_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "business": ("revenue", "profit", "market", "sales", "customer", "strategy"),
    "technical": ("algorithm", "system", "code", "development", "architecture"),
    "research": ("study", "analysis", "data", "research", "findings", "methodology"),
    "education": ("learn", "teach", "student", "course", "curriculum", "knowledge"),
    "healthcare": ("patient", "treatment", "medical", "health", "clinical", "diagnosis"),
}


def domain_scores(text: str) -> Dict[str, int]:
    """Number of distinct keywords of each domain found as substrings of ``text``."""

    lowered = text.lower()
    return {
        domain: sum(1 for keyword in keywords if keyword in lowered)
        for domain, keywords in DOMAIN_KEYWORDS.items()
    }


def infer_domain(text: str) -> str:
    """Return the best matching domain label, or ``"general"`` when nothing matches."""

    best_domain = GENERAL_DOMAIN
    best_score = 0
    for domain, score in domain_scores(text).items():
        if score > best_score:
            best_domain, best_score = domain, score
    return best_domain
