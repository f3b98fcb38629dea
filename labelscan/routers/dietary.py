"""
Dietary profile endpoints — programs (vegan, keto, ...), custom avoidances,
restriction checks and profile backup.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import Response

from labelscan.container import AppContainer, get_container
from labelscan.schemas.dietary import (
    CustomAvoidance,
    CustomAvoidanceCreate,
    DietaryProfile,
    PreferencePatch,
    PreferenceSuggestions,
    ProfileInsights,
    RestrictionCheck,
    RestrictionCheckRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dietary", tags=["dietary"])


@router.get("/profile", response_model=DietaryProfile)
async def get_profile(container: AppContainer = Depends(get_container)) -> DietaryProfile:
    return await container.profiles.load_profile()


@router.patch("/preferences/{preference_id}", response_model=DietaryProfile)
async def patch_preference(
    preference_id: str,
    body: PreferencePatch,
    container: AppContainer = Depends(get_container),
) -> DietaryProfile:
    """Switch a program on or off; an empty body toggles it."""
    return await container.profiles.set_preference_active(preference_id, body.is_active)


@router.post("/avoidances", response_model=CustomAvoidance, status_code=status.HTTP_201_CREATED)
async def add_avoidance(
    body: CustomAvoidanceCreate,
    container: AppContainer = Depends(get_container),
) -> CustomAvoidance:
    return await container.profiles.add_custom_avoidance(
        body.ingredient_name, body.reason, body.severity
    )


@router.delete("/avoidances/{avoidance_id}", response_model=DietaryProfile)
async def remove_avoidance(
    avoidance_id: str,
    container: AppContainer = Depends(get_container),
) -> DietaryProfile:
    return await container.profiles.remove_custom_avoidance(avoidance_id)


@router.post("/check", response_model=RestrictionCheck)
async def check_restriction(
    body: RestrictionCheckRequest,
    container: AppContainer = Depends(get_container),
) -> RestrictionCheck:
    return await container.profiles.check_restriction(body.ingredient)


@router.get("/insights", response_model=ProfileInsights)
async def insights(container: AppContainer = Depends(get_container)) -> ProfileInsights:
    return await container.profiles.insights()


@router.get("/suggestions", response_model=PreferenceSuggestions)
async def suggestions(container: AppContainer = Depends(get_container)) -> PreferenceSuggestions:
    """Programs worth switching on, judged from recurring problem ingredients in history."""
    sessions = await container.history.list()
    history = [s.analysis.ingredients for s in sessions if s.analysis is not None]
    return container.personalizer.suggest_preferences(history)


@router.post("/reset", response_model=DietaryProfile)
async def reset(container: AppContainer = Depends(get_container)) -> DietaryProfile:
    return await container.profiles.reset_profile()


@router.get("/export")
async def export_profile(container: AppContainer = Depends(get_container)) -> Response:
    document = await container.profiles.export_profile()
    return Response(
        content=document,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="dietary_profile.json"'},
    )


@router.post("/import", response_model=DietaryProfile)
async def import_profile(
    request: Request,
    container: AppContainer = Depends(get_container),
) -> DietaryProfile:
    """Restore a document produced by GET /dietary/export (raw JSON body)."""
    document = (await request.body()).decode("utf-8", errors="replace")
    return await container.profiles.import_profile(document)
