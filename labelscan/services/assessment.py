"""
Product-level verdict built from the final (personalized) ingredient list:
an overall assessment sentence, key findings and shopping recommendations.
"""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from labelscan.schemas.analysis import IngredientAnalysis, ProductAssessment, SafetyRating

MAX_COMMON_CONCERNS = 3
MAX_ALTERNATIVES = 3

_ALWAYS_RECOMMENDED = (
    "Choose products with shorter, more recognizable ingredient lists",
    "Look for organic or naturally preserved alternatives when possible",
)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def overall_assessment(ingredients: Sequence[IngredientAnalysis]) -> str:
    total = len(ingredients)
    if total == 0:
        return "No ingredients were recognized on this label."
    avoid = sum(1 for i in ingredients if i.rating == SafetyRating.AVOID)
    caution = sum(1 for i in ingredients if i.rating == SafetyRating.CAUTION)

    if avoid:
        return (
            f"This product contains {_plural(avoid, 'ingredient')} that should be avoided. "
            "Consider looking for alternatives with cleaner ingredient profiles."
        )
    if caution > total / 2:
        return (
            "This product has several ingredients that warrant caution. While not "
            "necessarily harmful, there may be better options available."
        )
    if caution == 0:
        return (
            "This product has a clean ingredient profile with all ingredients "
            "considered safe for most people."
        )
    return (
        "This product has a mixed ingredient profile. Most ingredients are acceptable, "
        "but some may require consideration based on your dietary needs."
    )


def key_findings(ingredients: Sequence[IngredientAnalysis]) -> list[str]:
    findings: list[str] = []
    avoid = [i.name for i in ingredients if i.rating == SafetyRating.AVOID]
    caution = [i.name for i in ingredients if i.rating == SafetyRating.CAUTION]

    if avoid:
        findings.append(f"Contains {_plural(len(avoid), 'ingredient')} to avoid: {', '.join(avoid)}")
    if caution:
        verb = "requires" if len(caution) == 1 else "require"
        findings.append(f"{_plural(len(caution), 'ingredient')} {verb} caution: {', '.join(caution)}")

    # Concerns shared by more than one ingredient
    concern_counts = Counter(c for i in ingredients for c in i.health_concerns)
    common = [c for c, n in concern_counts.items() if n > 1][:MAX_COMMON_CONCERNS]
    if common:
        findings.append(f"Common health concerns: {', '.join(common)}")
    return findings


def recommendations(ingredients: Sequence[IngredientAnalysis]) -> list[str]:
    result: list[str] = []
    if any(i.rating == SafetyRating.AVOID for i in ingredients):
        result.append(
            "Look for products without artificial colors, preservatives, or high fructose corn syrup"
        )

    alternatives: list[str] = []
    for item in ingredients:
        for alternative in item.alternatives:
            if alternative and alternative not in alternatives:
                alternatives.append(alternative)
    if alternatives:
        result.append(f"Consider products with: {', '.join(alternatives[:MAX_ALTERNATIVES])}")

    result.extend(_ALWAYS_RECOMMENDED)
    return result


def assess_product(ingredients: Sequence[IngredientAnalysis]) -> ProductAssessment:
    return ProductAssessment(
        overall_assessment=overall_assessment(ingredients),
        key_findings=key_findings(ingredients),
        recommendations=recommendations(ingredients),
    )
