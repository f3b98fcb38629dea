import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from labelscan.schemas.analysis import AnalysisResult, SafetyRating
from labelscan.schemas.scan import InvalidTransition, ScanSession
from labelscan.services.ocr import ExtractionFailure
from labelscan.services.scan_pipeline import (
    CANCELLED_MESSAGE,
    SUPERSEDED_MESSAGE,
    ScanPipeline,
    ScanSuperseded,
)
from labelscan.services.stores import InMemoryScanHistoryStore, PersistenceFailure

from .conftest import BlockingOCR, FakeOCR


class FailingFinalSave(InMemoryScanHistoryStore):
    """Accepts every write except the one that records completion."""

    async def upsert(self, session):
        if session.status == "completed":
            raise PersistenceFailure("database is locked")
        await super().upsert(session)


class SlowFirstSave(InMemoryScanHistoryStore):
    """Stores the first pending session, then blocks until `release` is set."""

    def __init__(self):
        super().__init__()
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def upsert(self, session):
        await super().upsert(session)
        if session.status == "pending" and not self.entered.is_set():
            self.entered.set()
            await self.release.wait()


# ── process_scan ─────────────────────────────────────────────────────────────


async def test_scan_happy_path(make_pipeline, history):
    result = await make_pipeline().process_scan(b"jpeg-bytes", image_ref="photo-1.jpg")

    session = result.session
    assert session.status == "completed"
    assert session.image_ref == "photo-1.jpg"
    assert session.error_message is None
    assert session.extraction.raw_text == "Ingredients: Water, Sugar, Salt."
    assert session.extraction.ingredients == ["Water", "Sugar", "Salt"]
    assert session.extraction.confidence == 90

    analysis = result.analysis
    assert analysis.outcome == "analyzed"
    assert [i.name for i in analysis.ingredients] == ["Water", "Sugar", "Salt"]
    assert [i.position for i in analysis.ingredients] == [1, 2, 3]
    assert analysis.summary.total == 3
    assert analysis.overall_safety_score == analysis.base_safety_score == 87
    assert analysis.assessment is not None

    stored = await history.get(session.id)
    assert stored.status == "completed"
    assert stored.analysis == analysis


async def test_scan_is_personalized_with_stored_profile(make_pipeline, profiles):
    await profiles.set_preference_active("low-sodium", True)

    analysis = (await make_pipeline().process_scan(b"img")).analysis

    salt = analysis.ingredients[2]
    assert salt.original_rating == SafetyRating.SAFE
    assert salt.rating == SafetyRating.CAUTION
    assert analysis.personalization.upgraded_to_caution == 1
    assert analysis.base_safety_score == 87
    assert analysis.overall_safety_score == 73


async def test_label_without_ingredients_completes_with_no_ingredients_found(make_pipeline):
    ocr = FakeOCR("Nutrition Facts Serving Size 1 cup. Distributed by Acme Foods Inc, Springfield, IL 62701")

    result = await make_pipeline(ocr=ocr).process_scan(b"img")

    assert result.session.status == "completed"
    assert result.analysis.outcome == "no_ingredients_found"
    assert result.analysis.ingredients == []
    assert result.analysis.overall_safety_score == 100


async def test_ocr_failure_marks_session_failed(make_pipeline, history):
    pipeline = make_pipeline(ocr=FakeOCR(error="Image too blurry"))

    with pytest.raises(ExtractionFailure, match="Image too blurry"):
        await pipeline.process_scan(b"img")

    [session] = await history.list()
    assert session.status == "failed"
    assert session.error_message == "Image too blurry"
    assert session.analysis is None


@pytest.mark.parametrize(
    "image, text, message",
    [(b"img", "   ", "No text detected in image"), (b"", "Water", "Empty image")],
)
async def test_nothing_to_read_is_an_extraction_failure(make_pipeline, history, image, text, message):
    ocr = FakeOCR(text)
    with pytest.raises(ExtractionFailure, match=message):
        await make_pipeline(ocr=ocr).process_scan(image)
    [session] = await history.list()
    assert session.status == "failed"


async def test_failed_final_save_still_hands_back_the_result(make_pipeline):
    store = FailingFinalSave()
    pipeline = make_pipeline(history_store=store)

    with pytest.raises(PersistenceFailure) as excinfo:
        await pipeline.process_scan(b"img")

    result = excinfo.value.result
    assert result is not None
    assert result.session.status == "completed"
    assert result.analysis.summary.total == 3
    [stored] = await store.list()
    assert stored.status == "processing"


async def test_newer_scan_supersedes_in_flight_scan(make_pipeline, history):
    ocr = BlockingOCR("Ingredients: Water, Salt")
    pipeline = make_pipeline(ocr=ocr)

    first = asyncio.create_task(pipeline.process_scan(b"img-1", supersede_key="device-1"))
    await ocr.entered.wait()
    second = await pipeline.process_scan(b"img-2", supersede_key="device-1")

    with pytest.raises(ScanSuperseded):
        await first
    assert second.session.status == "completed"

    sessions = {s.status: s for s in await history.list()}
    assert set(sessions) == {"completed", "failed"}
    assert sessions["failed"].error_message == SUPERSEDED_MESSAGE


async def test_scan_superseded_while_saving_is_recorded_as_failed(make_pipeline):
    store = SlowFirstSave()
    pipeline = make_pipeline(history_store=store)

    first = asyncio.create_task(pipeline.process_scan(b"img-1", supersede_key="device-1"))
    await store.entered.wait()
    second = await pipeline.process_scan(b"img-2", supersede_key="device-1")

    with pytest.raises(ScanSuperseded):
        await first
    assert second.session.status == "completed"
    assert sorted(s.status for s in await store.list()) == ["completed", "failed"]


async def test_different_keys_do_not_supersede_each_other(make_pipeline):
    ocr = BlockingOCR("Ingredients: Water")
    pipeline = make_pipeline(ocr=ocr)

    first = asyncio.create_task(pipeline.process_scan(b"img", supersede_key="device-1"))
    await ocr.entered.wait()
    await pipeline.process_scan(b"img", supersede_key="device-2")
    ocr.release.set()

    assert (await first).session.status == "completed"


async def test_cancelled_caller_sees_cancelled_error(make_pipeline, history):
    ocr = BlockingOCR("Ingredients: Water")
    pipeline = make_pipeline(ocr=ocr)

    task = asyncio.create_task(pipeline.process_scan(b"img", supersede_key="device-1"))
    await ocr.entered.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    [session] = await history.list()
    assert session.status == "failed"
    assert session.error_message == CANCELLED_MESSAGE


# ── Manual entry ─────────────────────────────────────────────────────────────


async def test_analyze_ingredients_skips_blank_names(make_pipeline):
    analysis = await make_pipeline().analyze_ingredients(["", "  ", " Water "])
    assert [(i.name, i.position) for i in analysis.ingredients] == [("Water", 1)]


async def test_analyze_nothing(make_pipeline):
    analysis = await make_pipeline().analyze_ingredients([])
    assert analysis.outcome == "no_ingredients_found"
    assert analysis.overall_safety_score == 100
    assert analysis.assessment is None


async def test_analyze_text(make_pipeline, history):
    analysis = await make_pipeline().analyze_text("INGREDIENTS: Sodium Benzoate, Water")
    assert [i.rating for i in analysis.ingredients] == [SafetyRating.AVOID, SafetyRating.SAFE]
    assert analysis.overall_safety_score == 60
    assert await history.list() == []


# ── Sessions and statistics ──────────────────────────────────────────────────


def test_session_transitions_are_enforced():
    session = ScanSession()
    with pytest.raises(InvalidTransition):
        session.transition("completed")
    session.transition("processing")
    session.transition("failed", error_message="boom")
    assert session.is_terminal
    with pytest.raises(InvalidTransition):
        session.transition("processing")


def test_scan_statistics():
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    sessions = [
        ScanSession(status="completed", created_at=now - timedelta(days=2),
                    analysis=AnalysisResult(overall_safety_score=87)),
        ScanSession(status="completed", created_at=now - timedelta(days=1),
                    analysis=AnalysisResult(overall_safety_score=74)),
        ScanSession(status="failed", created_at=now),
        ScanSession(status="pending", created_at=now - timedelta(days=5)),
    ]

    stats = ScanPipeline.scan_statistics(sessions)

    assert stats.total_scans == 4
    assert stats.completed_scans == 2
    assert stats.failed_scans == 1
    assert stats.average_safety_score == 81     # 80.5 rounds up
    assert stats.last_scan_date == now


def test_scan_statistics_of_empty_history():
    stats = ScanPipeline.scan_statistics([])
    assert stats.total_scans == 0
    assert stats.average_safety_score == 0
    assert stats.last_scan_date is None
