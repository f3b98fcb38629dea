"""
ScanPipeline — orchestrates one label photo from OCR text to a personalized
AnalysisResult.

Flow:
  1. create ScanSession (pending), persist
  2. processing, persist
  3. OCR provider → raw text            (error or empty text → ExtractionFailure)
  4. TextNormalizer → IngredientSplitter (no candidates → no_ingredients_found)
  5. classifier over the whole list, recombined in label order
  6. DietaryRestrictionEngine snapshot → PersonalizationLayer
  7. AggregateScorer + product assessment
  8. completed, persist                 (save error → PersistenceFailure with result)

Any error in 3-7 moves the session to failed with the error message and
re-raises. A new process_scan() for the same supersede_key cancels the
in-flight scan; its session ends failed and its caller gets ScanSuperseded.
Logs carry counts and timings only, never ingredient text.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, Optional, Sequence

from labelscan.schemas.analysis import AnalysisResult
from labelscan.schemas.scan import (
    ExtractionSummary,
    OCRResult,
    ScanResult,
    ScanSession,
    ScanStatistics,
)
from labelscan.services.aggregate_scorer import AggregateScorer
from labelscan.services.assessment import assess_product
from labelscan.services.dietary_engine import DietaryProfileService
from labelscan.services.ingredient_splitter import IngredientSplitter
from labelscan.services.ocr import ExtractionFailure, OCRProvider
from labelscan.services.personalization import PersonalizationLayer
from labelscan.services.safety_classifier import IngredientClassifier
from labelscan.services.stores import PersistenceFailure, ScanHistoryStore
from labelscan.services.text_normalizer import TextNormalizer

logger = logging.getLogger(__name__)

SUPERSEDED = "superseded"
SUPERSEDED_MESSAGE = "Scan superseded by a newer request"
CANCELLED_MESSAGE = "Scan cancelled before completion"


class ScanSuperseded(Exception):
    """The scan was cancelled because a newer scan replaced it."""


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class ScanPipeline:
    def __init__(
        self,
        ocr: OCRProvider,
        classifier: IngredientClassifier,
        profiles: DietaryProfileService,
        history: ScanHistoryStore,
        normalizer: Optional[TextNormalizer] = None,
        splitter: Optional[IngredientSplitter] = None,
        personalizer: Optional[PersonalizationLayer] = None,
        scorer: Optional[AggregateScorer] = None,
    ) -> None:
        self._ocr = ocr
        self._classifier = classifier
        self._profiles = profiles
        self._history = history
        self._normalizer = normalizer or TextNormalizer()
        self._splitter = splitter or IngredientSplitter()
        self._personalizer = personalizer or PersonalizationLayer()
        self._scorer = scorer or AggregateScorer()
        # supersede key → running scan task
        self._inflight: dict[str, asyncio.Task[ScanResult]] = {}

    # ── Image scans ───────────────────────────────────────────────────────────

    async def process_scan(
        self,
        image: bytes,
        image_ref: Optional[str] = None,
        supersede_key: Optional[str] = None,
    ) -> ScanResult:
        if supersede_key is None:
            return await self._run_scan(image, image_ref)

        previous = self._inflight.get(supersede_key)
        if previous is not None and not previous.done():
            logger.info("Cancelling in-flight scan for key %s.", supersede_key)
            previous.cancel(SUPERSEDED)

        task = asyncio.create_task(self._run_scan(image, image_ref))
        self._inflight[supersede_key] = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            # Our own caller was cancelled: let that propagate untouched
            if current is not None and current.cancelling():
                raise
            raise ScanSuperseded(SUPERSEDED_MESSAGE) from None
        finally:
            if self._inflight.get(supersede_key) is task:
                del self._inflight[supersede_key]

    async def _run_scan(self, image: bytes, image_ref: Optional[str]) -> ScanResult:
        started = time.perf_counter()
        session = ScanSession(image_ref=image_ref)

        try:
            await self._history.upsert(session)
            session.transition("processing")
            await self._history.upsert(session)

            ocr = await self._extract(image)
            text_started = time.perf_counter()
            candidates = self._splitter.split(self._normalizer.normalize(ocr.text))
            session.extraction = ExtractionSummary(
                raw_text=ocr.text,
                ingredients=candidates,
                confidence=ocr.confidence,
                processing_time_ms=_elapsed_ms(text_started),
            )
            analysis = await self.analyze_ingredients(candidates)
        except asyncio.CancelledError as exc:
            superseded = SUPERSEDED in exc.args
            await self._mark_failed(session, SUPERSEDED_MESSAGE if superseded else CANCELLED_MESSAGE)
            raise
        except Exception as exc:
            await self._mark_failed(session, str(exc) or exc.__class__.__name__)
            raise

        session.analysis = analysis
        session.transition("completed")
        result = ScanResult(session=session, analysis=analysis, processing_time_ms=_elapsed_ms(started))
        try:
            await self._history.upsert(session)
        except PersistenceFailure as exc:
            exc.result = result
            raise

        logger.info(
            "Scan %s completed: %d ingredient(s), score %d, %d ms.",
            session.id, len(analysis.ingredients), analysis.overall_safety_score,
            result.processing_time_ms,
        )
        return result

    async def _extract(self, image: bytes) -> OCRResult:
        if not image:
            raise ExtractionFailure("Empty image")
        ocr = await self._ocr.extract_text(image)
        if not ocr.text or not ocr.text.strip():
            raise ExtractionFailure("No text detected in image")
        return ocr

    async def _mark_failed(self, session: ScanSession, message: str) -> None:
        if session.is_terminal:
            return
        if session.status == "pending":
            session.transition("processing")
        session.transition("failed", error_message=message)
        try:
            await self._history.upsert(session)
        except PersistenceFailure as exc:
            logger.error("Could not record failure of scan %s: %s", session.id, exc)
        logger.warning("Scan %s failed: %s", session.id, message)

    # ── Manual entry ──────────────────────────────────────────────────────────

    async def analyze_ingredients(self, candidates: Sequence[str]) -> AnalysisResult:
        """Classify, personalize and score an already extracted ingredient list."""
        started = time.perf_counter()
        names = [c.strip() for c in candidates if c and c.strip()]
        if not names:
            return AnalysisResult(outcome="no_ingredients_found", processing_time_ms=_elapsed_ms(started))

        engine = await self._profiles.load_engine()
        analyses = await self._classifier.classify_many(names)
        analyses.sort(key=lambda a: a.position)

        personalized = self._personalizer.personalize(analyses, engine.snapshot())
        final = personalized.ingredients
        summary = self._scorer.tally(a.rating for a in final)
        result = AnalysisResult(
            outcome="analyzed",
            ingredients=final,
            overall_safety_score=self._scorer.score_summary(summary),
            base_safety_score=self._scorer.score(a.original_rating for a in final),
            summary=summary,
            personalization=personalized.summary,
            assessment=assess_product(final),
            processing_time_ms=_elapsed_ms(started),
        )
        logger.debug(
            "Analysed %d ingredient(s), %d personalized, in %d ms.",
            len(final), personalized.summary.total_personalized, result.processing_time_ms,
        )
        return result

    async def analyze_text(self, text: str) -> AnalysisResult:
        """Same as a scan's text stage for label text typed or pasted by the user."""
        candidates = self._splitter.split(self._normalizer.normalize(text))
        return await self.analyze_ingredients(candidates)

    # ── History ───────────────────────────────────────────────────────────────

    @staticmethod
    def scan_statistics(sessions: Iterable[ScanSession]) -> ScanStatistics:
        sessions = list(sessions)
        completed = [s for s in sessions if s.status == "completed"]
        failed = sum(1 for s in sessions if s.status == "failed")
        scores = [s.analysis.overall_safety_score if s.analysis else 0 for s in completed]
        average = (2 * sum(scores) + len(scores)) // (2 * len(scores)) if scores else 0
        return ScanStatistics(
            total_scans=len(sessions),
            completed_scans=len(completed),
            failed_scans=failed,
            average_safety_score=average,
            last_scan_date=max((s.created_at for s in sessions), default=None),
        )
