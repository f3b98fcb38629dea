"""Ingredient lookup endpoints — autocomplete and single-ingredient classification."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from labelscan.container import AppContainer, get_container
from labelscan.schemas.analysis import IngredientAnalysis

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.get("/suggestions", response_model=list[str])
async def suggestions(
    q: str = Query(..., min_length=1, max_length=100),
    limit: int = Query(10, ge=1, le=50),
    container: AppContainer = Depends(get_container),
) -> list[str]:
    """Canonical ingredient names containing `q`."""
    return container.knowledge_base.suggest(q, limit=limit)


@router.get("/{name}", response_model=IngredientAnalysis)
async def classify(name: str, container: AppContainer = Depends(get_container)) -> IngredientAnalysis:
    """Base (unpersonalized) classification of one ingredient name."""
    analyses = await container.classifier.classify_many([name])
    return analyses[0]
