"""Shared fixtures: built-in knowledge base, in-memory stores and fake OCR providers."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

import pytest

from labelscan.schemas.scan import OCRResult
from labelscan.services.dietary_engine import DietaryProfileService, DietaryRestrictionEngine
from labelscan.services.fuzzy_matcher import FuzzyMatcher
from labelscan.services.knowledge_base import KnowledgeBase
from labelscan.services.ocr import ExtractionFailure
from labelscan.services.safety_classifier import SafetyClassifier
from labelscan.services.scan_pipeline import ScanPipeline
from labelscan.services.stores import InMemoryDietaryProfileStore, InMemoryScanHistoryStore


class FakeOCR:
    """Returns canned text, or raises ExtractionFailure when `error` is set."""

    def __init__(self, text: str = "", confidence: int = 90, error: Optional[str] = None) -> None:
        self.text = text
        self.confidence = confidence
        self.error = error
        self.calls = 0

    async def extract_text(self, image: bytes) -> OCRResult:
        self.calls += 1
        if self.error:
            raise ExtractionFailure(self.error)
        return OCRResult(text=self.text, confidence=self.confidence, source="fake")


class BlockingOCR(FakeOCR):
    """First call blocks until `release` is set; later calls return at once."""

    def __init__(self, text: str) -> None:
        super().__init__(text=text)
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def extract_text(self, image: bytes) -> OCRResult:
        self.calls += 1
        if self.calls == 1:
            self.entered.set()
            await self.release.wait()
        return OCRResult(text=self.text, confidence=self.confidence, source="fake")


@pytest.fixture(scope="session")
def knowledge_base() -> KnowledgeBase:
    return KnowledgeBase.from_seed()


@pytest.fixture
def matcher(knowledge_base: KnowledgeBase) -> FuzzyMatcher:
    return FuzzyMatcher(knowledge_base)


@pytest.fixture
def classifier(matcher: FuzzyMatcher) -> SafetyClassifier:
    return SafetyClassifier(matcher)


@pytest.fixture
def engine() -> DietaryRestrictionEngine:
    return DietaryRestrictionEngine()


@pytest.fixture
def profile_store() -> InMemoryDietaryProfileStore:
    return InMemoryDietaryProfileStore()


@pytest.fixture
def profiles(profile_store: InMemoryDietaryProfileStore) -> DietaryProfileService:
    return DietaryProfileService(profile_store)


@pytest.fixture
def history() -> InMemoryScanHistoryStore:
    return InMemoryScanHistoryStore(max_history=50)


@pytest.fixture
def make_pipeline(
    classifier: SafetyClassifier,
    profiles: DietaryProfileService,
    history: InMemoryScanHistoryStore,
) -> Callable[..., ScanPipeline]:
    def _make(ocr=None, history_store=None) -> ScanPipeline:
        return ScanPipeline(
            ocr=ocr or FakeOCR("Ingredients: Water, Sugar, Salt."),
            classifier=classifier,
            profiles=profiles,
            history=history_store or history,
        )

    return _make
