"""Pydantic schemas for ingredient classification and analysis results."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SafetyRating(str, Enum):
    """Ingredient safety rating, ordered by severity: safe < caution < avoid."""

    SAFE = "safe"
    CAUTION = "caution"
    AVOID = "avoid"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SafetyRating):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SafetyRating):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SafetyRating):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SafetyRating):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {SafetyRating.SAFE: 0, SafetyRating.CAUTION: 1, SafetyRating.AVOID: 2}


class IngredientEntry(BaseModel):
    """A knowledge-base record. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: str
    safety_rating: SafetyRating
    confidence: int = Field(..., ge=0, le=100)
    explanation: str
    health_concerns: tuple[str, ...] = ()
    alternatives: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()


class IngredientAnalysis(BaseModel):
    """Classification of one candidate ingredient from a label."""

    name: str                          # text as it appeared on the label
    position: int = Field(..., ge=1)   # 1-based position in the candidate list
    rating: SafetyRating
    confidence: int = Field(..., ge=0, le=100)
    explanation: str
    category: str = "unknown"
    health_concerns: list[str] = Field(default_factory=list)
    alternatives: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    matched_entry: Optional[str] = None   # canonical KB name, None for heuristic results


class PersonalizedAnalysis(IngredientAnalysis):
    """
    IngredientAnalysis re-scored against the user's dietary restrictions.
    `rating` always mirrors `personalized_rating`.
    """

    original_rating: SafetyRating
    personalized_rating: SafetyRating
    personalization_reasons: list[str] = Field(default_factory=list)
    is_personalized: bool = False

    @model_validator(mode="after")
    def _check_personalization(self) -> "PersonalizedAnalysis":
        if self.rating != self.personalized_rating:
            raise ValueError("rating must equal personalized_rating")
        if self.is_personalized and not self.personalization_reasons:
            raise ValueError("a personalized rating needs at least one reason")
        if not self.is_personalized and (
            self.personalized_rating != self.original_rating
            or self.personalization_reasons
        ):
            raise ValueError("an unpersonalized rating cannot change or carry reasons")
        return self


class RatingSummary(BaseModel):
    """Per-rating tally of an analysed ingredient list."""

    safe: int = 0
    caution: int = 0
    avoid: int = 0

    @property
    def total(self) -> int:
        return self.safe + self.caution + self.avoid


class PersonalizationSummary(BaseModel):
    """Derived counters describing what personalization changed."""

    total_personalized: int = 0
    upgraded_to_avoid: int = 0
    upgraded_to_caution: int = 0
    reasons_applied: list[str] = Field(default_factory=list)


class ProductAssessment(BaseModel):
    """Human-readable verdict for the whole product."""

    overall_assessment: str
    key_findings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    """
    Final, personalized analysis of one ingredient list.
    summary counts always add up to len(ingredients).
    """

    outcome: Literal["analyzed", "no_ingredients_found"] = "analyzed"
    ingredients: list[PersonalizedAnalysis] = Field(default_factory=list)
    overall_safety_score: int = Field(100, ge=0, le=100)
    base_safety_score: int = Field(100, ge=0, le=100)
    summary: RatingSummary = Field(default_factory=RatingSummary)
    personalization: PersonalizationSummary = Field(default_factory=PersonalizationSummary)
    assessment: Optional[ProductAssessment] = None
    processing_time_ms: int = 0

    @model_validator(mode="after")
    def _check_counts(self) -> "AnalysisResult":
        if self.summary.total != len(self.ingredients):
            raise ValueError("rating summary does not match the ingredient count")
        return self
