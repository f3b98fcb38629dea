"""
PersonalizationLayer — re-scores classified ingredients against one user's
dietary restrictions.

Rules per ingredient:
  1. should_avoid           → avoid, whatever the base rating was
  2. should_flag + base safe → caution
  3. anything else          → unchanged (a flag never downgrades caution/avoid)

Runs only after the whole list is classified, against a restriction-engine
snapshot taken once per scan.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from labelscan.schemas.analysis import (
    IngredientAnalysis,
    PersonalizationSummary,
    PersonalizedAnalysis,
    SafetyRating,
)
from labelscan.schemas.dietary import PreferenceSuggestions
from labelscan.services.dietary_engine import DietaryRestrictionEngine
from labelscan.utils.dietary_data import PREFERENCE_HINTS

PERSONALIZED_PREFIX = "Personalized for your dietary preferences: "


@dataclass
class PersonalizationOutcome:
    """Personalized list in label order plus counters derived from it."""

    ingredients: list[PersonalizedAnalysis] = field(default_factory=list)
    summary: PersonalizationSummary = field(default_factory=PersonalizationSummary)


class PersonalizationLayer:
    def personalize(
        self,
        analyses: Sequence[IngredientAnalysis],
        engine: DietaryRestrictionEngine,
    ) -> PersonalizationOutcome:
        ingredients = [self.personalize_one(a, engine) for a in analyses]
        return PersonalizationOutcome(ingredients=ingredients, summary=self.summarize(ingredients))

    @staticmethod
    def personalize_one(
        analysis: IngredientAnalysis, engine: DietaryRestrictionEngine
    ) -> PersonalizedAnalysis:
        check = engine.check_restriction(analysis.name)
        base = analysis.rating
        final = base
        reasons: list[str] = []

        if check.should_avoid:
            final = SafetyRating.AVOID
            reasons = list(check.reasons)
        elif check.should_flag and base == SafetyRating.SAFE:
            final = SafetyRating.CAUTION
            reasons = list(check.reasons)

        personalized = bool(reasons)
        explanation = analysis.explanation
        if personalized:
            explanation = f"{explanation}\n\n{PERSONALIZED_PREFIX}{'; '.join(reasons)}"

        return PersonalizedAnalysis(
            **analysis.model_dump(exclude={"rating", "explanation"}),
            rating=final,
            explanation=explanation,
            original_rating=base,
            personalized_rating=final,
            personalization_reasons=reasons,
            is_personalized=personalized,
        )

    @staticmethod
    def summarize(ingredients: Iterable[PersonalizedAnalysis]) -> PersonalizationSummary:
        summary = PersonalizationSummary()
        for item in ingredients:
            if not item.is_personalized:
                continue
            summary.total_personalized += 1
            if item.original_rating != SafetyRating.AVOID and item.personalized_rating == SafetyRating.AVOID:
                summary.upgraded_to_avoid += 1
            elif item.original_rating == SafetyRating.SAFE and item.personalized_rating == SafetyRating.CAUTION:
                summary.upgraded_to_caution += 1
            for reason in item.personalization_reasons:
                if reason not in summary.reasons_applied:
                    summary.reasons_applied.append(reason)
        return summary

    @staticmethod
    def suggest_preferences(
        history: Iterable[Sequence[IngredientAnalysis]],
    ) -> PreferenceSuggestions:
        """
        Suggest dietary programs from problem ingredients (caution/avoid)
        that keep turning up across past scans.
        """
        counts = Counter(
            item.name.lower().strip()
            for scan in history
            for item in scan
            if item.rating in (SafetyRating.CAUTION, SafetyRating.AVOID)
        )
        suggestions = PreferenceSuggestions()
        for keywords, preference_id, reason in PREFERENCE_HINTS:
            if any(counts.get(k) for k in keywords) and preference_id not in suggestions.suggested_preferences:
                suggestions.suggested_preferences.append(preference_id)
                suggestions.reasons.append(reason)
        return suggestions
