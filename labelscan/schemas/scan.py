"""Pydantic schemas for scan sessions, OCR output and scan endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field

from labelscan.schemas.analysis import AnalysisResult

ScanStatus = Literal["pending", "processing", "completed", "failed"]

# Allowed status changes. completed/failed are terminal; nothing skips processing.
_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"processing"}),
    "processing": frozenset({"completed", "failed"}),
    "completed": frozenset(),
    "failed": frozenset(),
}


class InvalidTransition(ValueError):
    """Raised on an illegal scan status change."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_session_id() -> str:
    return f"scan_{uuid.uuid4().hex}"


class OCRResult(BaseModel):
    """Text returned by an OCR provider."""

    text: str
    confidence: int = Field(0, ge=0, le=100)
    source: str = "unknown"


class ExtractionSummary(BaseModel):
    """What the text stage produced for a scan."""

    raw_text: str
    ingredients: list[str] = Field(default_factory=list)
    confidence: int = Field(0, ge=0, le=100)
    processing_time_ms: int = 0


class ScanSession(BaseModel):
    """
    One scan of one label image.
    Lifecycle: pending → processing → completed | failed.
    """

    id: str = Field(default_factory=new_session_id)
    image_ref: Optional[str] = None
    status: ScanStatus = "pending"
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    extraction: Optional[ExtractionSummary] = None
    analysis: Optional[AnalysisResult] = None
    error_message: Optional[str] = None

    def transition(self, status: ScanStatus, error_message: Optional[str] = None) -> None:
        """Move to `status`, raising InvalidTransition if the change is not allowed."""
        if status not in _TRANSITIONS[self.status]:
            raise InvalidTransition(f"Cannot move scan {self.id} from {self.status} to {status}")
        self.status = status
        if error_message is not None:
            self.error_message = error_message
        self.updated_at = _utcnow()

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.status]


class ScanResult(BaseModel):
    """Returned by ScanPipeline.process_scan."""

    session: ScanSession
    analysis: AnalysisResult
    processing_time_ms: int = 0


class ScanStatistics(BaseModel):
    """Summary of the stored scan history."""

    total_scans: int = 0
    completed_scans: int = 0
    failed_scans: int = 0
    average_safety_score: int = 0
    last_scan_date: Optional[datetime] = None


# ── Request bodies ────────────────────────────────────────────────────────────


class AnalyzeIngredientsRequest(BaseModel):
    """Body for POST /scans/analyze — an already extracted ingredient list."""

    ingredients: list[str] = Field(default_factory=list, max_length=200)


class AnalyzeTextRequest(BaseModel):
    """Body for POST /scans/text — label text typed or pasted by the user."""

    text: str = Field(..., max_length=10_000)
