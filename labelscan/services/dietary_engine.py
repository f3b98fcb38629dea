"""
DietaryRestrictionEngine — decides whether an ingredient conflicts with the
user's active dietary programs or custom avoidances.

Matching is case-insensitive substring containment in either direction
("whey protein" hits "whey"; "milk" hits "milk powder"). Every matching
source contributes a reason; should_avoid wins over should_flag downstream.

The engine holds its own copy of a DietaryProfile. A scan works on
snapshot() so profile edits made while it runs cannot mix into one result.

DietaryProfileService is the async, store-backed face of the engine used by
the HTTP layer: each call loads the profile, applies one change and saves.
Changes are serialised with a lock so concurrent edits cannot overwrite one
another.
"""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from pydantic import ValidationError

from labelscan.schemas.dietary import (
    AvoidanceSeverity,
    CustomAvoidance,
    DietaryPreference,
    DietaryProfile,
    ProfileInsights,
    RestrictionCheck,
)
from labelscan.utils.dietary_data import (
    AVOID_REASON_TEMPLATE,
    CUSTOM_REASON_TEMPLATE,
    DEFAULT_PREFERENCES,
    FLAG_REASON_TEMPLATE,
)

if TYPE_CHECKING:
    from labelscan.services.stores import DietaryProfileStore

logger = logging.getLogger(__name__)


class UnknownPreference(LookupError):
    """No dietary program with the given id."""


class UnknownAvoidance(LookupError):
    """No custom avoidance with the given id."""


class InvalidProfile(ValueError):
    """An imported profile document failed validation."""


def default_profile() -> DietaryProfile:
    """The built-in catalog with every program switched off and no avoidances."""
    return DietaryProfile(
        preferences=[DietaryPreference(**p, is_active=False) for p in DEFAULT_PREFERENCES],
        custom_avoidances=[],
    )


def _contains_either_way(a: str, b: str) -> bool:
    return a in b or b in a


def _matches_any(name: str, terms: list[str]) -> bool:
    for term in terms:
        term = term.lower().strip()
        if term and _contains_either_way(name, term):
            return True
    return False


# ── Engine ────────────────────────────────────────────────────────────────────


class DietaryRestrictionEngine:
    def __init__(self, profile: Optional[DietaryProfile] = None) -> None:
        self._profile = (profile or default_profile()).model_copy(deep=True)

    @property
    def profile(self) -> DietaryProfile:
        """A copy of the current profile."""
        return self._profile.model_copy(deep=True)

    @property
    def active_preferences(self) -> list[DietaryPreference]:
        return [p for p in self._profile.preferences if p.is_active]

    def snapshot(self) -> "DietaryRestrictionEngine":
        """Independent engine frozen at the current state; later edits do not reach it."""
        return DietaryRestrictionEngine(self._profile)

    def check_restriction(self, ingredient_name: str) -> RestrictionCheck:
        name = (ingredient_name or "").lower().strip()
        if not name:
            return RestrictionCheck()

        check = RestrictionCheck()
        for avoidance in self._profile.custom_avoidances:
            target = avoidance.ingredient_name.lower().strip()
            if not target or not _contains_either_way(name, target):
                continue
            if avoidance.severity == "avoid":
                check.should_avoid = True
            else:
                check.should_flag = True
            check.reasons.append(CUSTOM_REASON_TEMPLATE.format(reason=avoidance.reason))

        for preference in self.active_preferences:
            if _matches_any(name, preference.ingredients_to_avoid):
                check.should_avoid = True
                check.reasons.append(
                    AVOID_REASON_TEMPLATE.format(
                        label=preference.label, description=preference.description
                    )
                )
            elif _matches_any(name, preference.ingredients_to_flag):
                check.should_flag = True
                check.reasons.append(FLAG_REASON_TEMPLATE.format(label=preference.label))
        return check

    # ── Mutations ─────────────────────────────────────────────────────────────

    def _preference(self, preference_id: str) -> DietaryPreference:
        for preference in self._profile.preferences:
            if preference.id == preference_id:
                return preference
        raise UnknownPreference(preference_id)

    def _touch(self) -> None:
        self._profile.last_updated = datetime.now(timezone.utc)

    def set_preference_active(self, preference_id: str, is_active: bool) -> DietaryPreference:
        preference = self._preference(preference_id)
        preference.is_active = is_active
        self._touch()
        return preference.model_copy()

    def toggle_preference(self, preference_id: str) -> DietaryPreference:
        preference = self._preference(preference_id)
        return self.set_preference_active(preference_id, not preference.is_active)

    def add_custom_avoidance(
        self,
        ingredient_name: str,
        reason: str = "",
        severity: AvoidanceSeverity = "avoid",
    ) -> CustomAvoidance:
        avoidance = CustomAvoidance(
            id=f"custom_{uuid.uuid4().hex[:12]}",
            ingredient_name=ingredient_name.strip(),
            reason=reason.strip() or f"You chose to avoid {ingredient_name.strip()}",
            severity=severity,
        )
        self._profile.custom_avoidances.append(avoidance)
        self._touch()
        return avoidance.model_copy()

    def remove_custom_avoidance(self, avoidance_id: str) -> CustomAvoidance:
        for index, avoidance in enumerate(self._profile.custom_avoidances):
            if avoidance.id == avoidance_id:
                del self._profile.custom_avoidances[index]
                self._touch()
                return avoidance
        raise UnknownAvoidance(avoidance_id)

    def insights(self) -> ProfileInsights:
        active = self.active_preferences
        by_category = Counter(p.category for p in active)
        most_restrictive = by_category.most_common(1)[0][0] if by_category else "none"
        custom = len(self._profile.custom_avoidances)
        return ProfileInsights(
            active_preferences=len(active),
            custom_avoidances=custom,
            total_restrictions=len(active) + custom,
            most_restrictive_category=most_restrictive,
        )


# ── Store-backed service ──────────────────────────────────────────────────────


class DietaryProfileService:
    def __init__(self, store: "DietaryProfileStore") -> None:
        self._store = store
        # One service per profile key; guards load -> change -> save
        self._lock = asyncio.Lock()

    async def load_profile(self) -> DietaryProfile:
        return await self._store.load()

    async def load_engine(self) -> DietaryRestrictionEngine:
        """Fresh engine over the stored profile; one per scan."""
        return DietaryRestrictionEngine(await self._store.load())

    async def _save(self, engine: DietaryRestrictionEngine) -> DietaryProfile:
        profile = engine.profile
        await self._store.save(profile)
        return profile

    async def set_preference_active(
        self, preference_id: str, is_active: Optional[bool] = None
    ) -> DietaryProfile:
        """Set a program's active flag; None toggles it."""
        async with self._lock:
            engine = await self.load_engine()
            if is_active is None:
                preference = engine.toggle_preference(preference_id)
            else:
                preference = engine.set_preference_active(preference_id, is_active)
            logger.info("Dietary program %s is now %s.", preference.id,
                        "active" if preference.is_active else "inactive")
            return await self._save(engine)

    async def add_custom_avoidance(
        self,
        ingredient_name: str,
        reason: str = "",
        severity: AvoidanceSeverity = "avoid",
    ) -> CustomAvoidance:
        async with self._lock:
            engine = await self.load_engine()
            avoidance = engine.add_custom_avoidance(ingredient_name, reason, severity)
            await self._save(engine)
        return avoidance

    async def remove_custom_avoidance(self, avoidance_id: str) -> DietaryProfile:
        async with self._lock:
            engine = await self.load_engine()
            engine.remove_custom_avoidance(avoidance_id)
            return await self._save(engine)

    async def check_restriction(self, ingredient_name: str) -> RestrictionCheck:
        engine = await self.load_engine()
        return engine.check_restriction(ingredient_name)

    async def reset_profile(self) -> DietaryProfile:
        profile = default_profile()
        async with self._lock:
            await self._store.save(profile)
        logger.info("Dietary profile reset to defaults.")
        return profile

    async def export_profile(self) -> str:
        profile = await self._store.load()
        return profile.model_dump_json(indent=2)

    async def import_profile(self, document: str) -> DietaryProfile:
        """Replace the stored profile with a previously exported JSON document."""
        try:
            data = json.loads(document)
        except json.JSONDecodeError as exc:
            raise InvalidProfile(f"Profile is not valid JSON: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("preferences"), list):
            raise InvalidProfile("Profile must contain a 'preferences' list")
        try:
            profile = DietaryProfile.model_validate(data)
        except ValidationError as exc:
            raise InvalidProfile(f"Invalid profile: {exc.error_count()} validation error(s)") from exc
        async with self._lock:
            await self._store.save(profile)
        logger.info(
            "Dietary profile imported: %d programs, %d custom avoidances.",
            len(profile.preferences), len(profile.custom_avoidances),
        )
        return profile

    async def insights(self) -> ProfileInsights:
        engine = await self.load_engine()
        return engine.insights()
