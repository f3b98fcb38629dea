"""
SafetyClassifier — rates one candidate ingredient.

Resolved names copy the KnowledgeBase entry verbatim. Unresolved names get a
provisional category/rating from ordered naming heuristics and an honestly
lowered confidence. Pure: no I/O, no logging of ingredient data.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from labelscan.schemas.analysis import IngredientAnalysis, IngredientEntry, SafetyRating
from labelscan.services.fuzzy_matcher import FuzzyMatcher
from labelscan.utils.ingredient_data import (
    FALLBACK_HEALTH_CONCERNS,
    FALLBACK_PATTERNS,
    FALLBACK_SOURCES,
    UNKNOWN_CATEGORY,
    UNKNOWN_CONFIDENCE,
)


class IngredientClassifier(Protocol):
    """Anything the pipeline can hand a candidate list to."""

    async def classify_many(self, names: Sequence[str]) -> list[IngredientAnalysis]:
        """Classify `names`; result i has position i + 1."""
        ...


def clamp_confidence(value: float) -> int:
    return max(0, min(100, int(round(value))))


class SafetyClassifier:
    def __init__(self, matcher: FuzzyMatcher) -> None:
        self._matcher = matcher

    def classify(self, name: str, position: int) -> IngredientAnalysis:
        entry = self._matcher.match(name)
        if entry is not None:
            return self.from_entry(name, position, entry)
        return self.fallback(name, position)

    async def classify_many(self, names: Sequence[str]) -> list[IngredientAnalysis]:
        return [self.classify(name, i) for i, name in enumerate(names, start=1)]

    @staticmethod
    def from_entry(name: str, position: int, entry: IngredientEntry) -> IngredientAnalysis:
        return IngredientAnalysis(
            name=name,
            position=position,
            rating=entry.safety_rating,
            confidence=clamp_confidence(entry.confidence),
            explanation=entry.explanation,
            category=entry.category,
            health_concerns=list(entry.health_concerns),
            alternatives=list(entry.alternatives),
            sources=list(entry.sources),
            matched_entry=entry.name,
        )

    @staticmethod
    def fallback(name: str, position: int) -> IngredientAnalysis:
        """Naming-pattern classification for names missing from the knowledge base."""
        lowered = name.lower()
        category, rating, confidence = UNKNOWN_CATEGORY, SafetyRating.CAUTION, UNKNOWN_CONFIDENCE
        for keywords, pattern_category, pattern_rating, pattern_confidence in FALLBACK_PATTERNS:
            if any(k in lowered for k in keywords):
                category = pattern_category
                rating = SafetyRating(pattern_rating)
                confidence = pattern_confidence
                break

        if category == UNKNOWN_CATEGORY:
            explanation = (
                f"{name} is not in our ingredient database and its name does not "
                "suggest a category. We recommend researching this ingredient further."
            )
        else:
            explanation = (
                f"{name} is not in our ingredient database. Based on naming patterns, "
                f"it appears to be a {category}. We recommend researching this ingredient further."
            )

        return IngredientAnalysis(
            name=name,
            position=position,
            rating=rating,
            confidence=clamp_confidence(confidence),
            explanation=explanation,
            category=category,
            health_concerns=list(FALLBACK_HEALTH_CONCERNS),
            alternatives=[],
            sources=list(FALLBACK_SOURCES),
            matched_entry=None,
        )
