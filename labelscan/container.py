"""
Composition root — one instance of every long-lived service, built once in
the FastAPI lifespan and stored on app.state.container.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from labelscan.config import Settings
from labelscan.services.dietary_engine import DietaryProfileService
from labelscan.services.fuzzy_matcher import FuzzyMatcher
from labelscan.services.knowledge_base import KnowledgeBase
from labelscan.services.ocr import OCRProvider, build_ocr_provider
from labelscan.services.personalization import PersonalizationLayer
from labelscan.services.safety_classifier import IngredientClassifier, SafetyClassifier
from labelscan.services.scan_pipeline import ScanPipeline
from labelscan.services.stores import (
    ScanHistoryStore,
    SqlDietaryProfileStore,
    SqlScanHistoryStore,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    knowledge_base: KnowledgeBase
    classifier: IngredientClassifier
    profiles: DietaryProfileService
    history: ScanHistoryStore
    personalizer: PersonalizationLayer
    pipeline: ScanPipeline


def build_classifier(settings: Settings, rules: SafetyClassifier) -> IngredientClassifier:
    if not settings.use_llm_classifier:
        return rules
    # Imported lazily: configures google.generativeai on import
    from labelscan.services.llm_classifier import LLMSafetyClassifier  # noqa: PLC0415

    logger.info("LLM classifier enabled (%s, fallback %s).",
                settings.gemma_model, settings.gemma_fallback_model)
    return LLMSafetyClassifier(
        fallback=rules,
        batch_size=settings.llm_batch_size,
        cache_ttl_seconds=settings.llm_cache_ttl_seconds,
    )


def build_container(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    ocr: OCRProvider | None = None,
) -> AppContainer:
    knowledge_base = KnowledgeBase.from_seed(settings.knowledge_base_path)
    rules = SafetyClassifier(FuzzyMatcher(knowledge_base))
    classifier = build_classifier(settings, rules)
    profiles = DietaryProfileService(SqlDietaryProfileStore(session_factory, settings.profile_key))
    history = SqlScanHistoryStore(session_factory, max_history=settings.scan_history_limit)
    personalizer = PersonalizationLayer()
    pipeline = ScanPipeline(
        ocr=ocr or build_ocr_provider(settings),
        classifier=classifier,
        profiles=profiles,
        history=history,
        personalizer=personalizer,
    )
    return AppContainer(
        knowledge_base=knowledge_base,
        classifier=classifier,
        profiles=profiles,
        history=history,
        personalizer=personalizer,
        pipeline=pipeline,
    )


def get_container(request: Request) -> AppContainer:
    """FastAPI dependency."""
    return request.app.state.container
