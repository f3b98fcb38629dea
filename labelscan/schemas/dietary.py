"""Pydantic schemas for dietary preferences, custom avoidances and restriction checks."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

PreferenceCategory = Literal["medical", "lifestyle", "religious", "allergy"]
AvoidanceSeverity = Literal["avoid", "caution"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DietaryPreference(BaseModel):
    """A dietary program the user can switch on (vegan, keto, gluten-free, ...)."""

    id: str
    name: str
    label: str
    description: str
    is_active: bool = False
    category: PreferenceCategory
    ingredients_to_avoid: list[str] = Field(default_factory=list)
    ingredients_to_flag: list[str] = Field(default_factory=list)


class CustomAvoidance(BaseModel):
    """An ingredient the user asked to avoid or be warned about."""

    id: str
    ingredient_name: str = Field(..., min_length=1)
    reason: str
    severity: AvoidanceSeverity = "avoid"
    date_added: datetime = Field(default_factory=_utcnow)


class DietaryProfile(BaseModel):
    """Everything the restriction engine needs; the unit persisted by the profile store."""

    preferences: list[DietaryPreference] = Field(default_factory=list)
    custom_avoidances: list[CustomAvoidance] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=_utcnow)


class RestrictionCheck(BaseModel):
    """Outcome of checking one ingredient. should_avoid wins over should_flag."""

    should_avoid: bool = False
    should_flag: bool = False
    reasons: list[str] = Field(default_factory=list)


class ProfileInsights(BaseModel):
    """Counts describing how restrictive the current profile is."""

    active_preferences: int
    custom_avoidances: int
    total_restrictions: int
    most_restrictive_category: str


class PreferenceSuggestions(BaseModel):
    """Dietary programs suggested from recurring problem ingredients in scan history."""

    suggested_preferences: list[str] = Field(default_factory=list)
    reasons: list[str] = Field(default_factory=list)


# ── Request bodies ────────────────────────────────────────────────────────────


class PreferencePatch(BaseModel):
    """Body for PATCH /dietary/preferences/{id}. Omit is_active to toggle."""

    is_active: bool | None = None


class CustomAvoidanceCreate(BaseModel):
    """Body for POST /dietary/avoidances."""

    ingredient_name: str = Field(..., min_length=1, max_length=100)
    reason: str = Field("", max_length=300)
    severity: AvoidanceSeverity = "avoid"


class RestrictionCheckRequest(BaseModel):
    """Body for POST /dietary/check."""

    ingredient: str = Field(..., min_length=1, max_length=100)
