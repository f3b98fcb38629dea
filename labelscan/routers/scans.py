"""
Scan endpoints — label photo upload, manual ingredient entry and scan history.

A client that retakes a photo sends the same X-Device-ID header; the newer
upload cancels the older one, whose request answers 409.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Header, HTTPException, Query, UploadFile, status
from fastapi.responses import Response

from labelscan.container import AppContainer, get_container
from labelscan.schemas.analysis import AnalysisResult
from labelscan.schemas.scan import (
    AnalyzeIngredientsRequest,
    AnalyzeTextRequest,
    ScanResult,
    ScanSession,
    ScanStatistics,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scans", tags=["scans"])

MAX_IMAGE_BYTES = 10 * 1024 * 1024


@router.post("", response_model=ScanResult)
async def create_scan(
    image: UploadFile = File(...),
    x_device_id: Optional[str] = Header(None, alias="X-Device-ID"),
    container: AppContainer = Depends(get_container),
) -> ScanResult:
    """Run OCR + analysis on an uploaded label photo."""
    data = await image.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty image upload")
    if len(data) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image larger than {MAX_IMAGE_BYTES // (1024 * 1024)} MB",
        )
    return await container.pipeline.process_scan(
        data, image_ref=image.filename, supersede_key=x_device_id
    )


@router.post("/analyze", response_model=AnalysisResult)
async def analyze_ingredients(
    body: AnalyzeIngredientsRequest,
    container: AppContainer = Depends(get_container),
) -> AnalysisResult:
    """Analyse an ingredient list the client already has."""
    return await container.pipeline.analyze_ingredients(body.ingredients)


@router.post("/text", response_model=AnalysisResult)
async def analyze_text(
    body: AnalyzeTextRequest,
    container: AppContainer = Depends(get_container),
) -> AnalysisResult:
    """Analyse raw label text typed or pasted by the user."""
    return await container.pipeline.analyze_text(body.text)


@router.get("", response_model=list[ScanSession])
async def list_scans(
    limit: int = Query(50, ge=1, le=200),
    container: AppContainer = Depends(get_container),
) -> list[ScanSession]:
    """Scan history, most recent first."""
    return await container.history.list(limit=limit)


@router.get("/stats", response_model=ScanStatistics)
async def scan_stats(container: AppContainer = Depends(get_container)) -> ScanStatistics:
    sessions = await container.history.list()
    return container.pipeline.scan_statistics(sessions)


@router.get("/{scan_id}", response_model=ScanSession)
async def get_scan(scan_id: str, container: AppContainer = Depends(get_container)) -> ScanSession:
    session = await container.history.get(scan_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Scan not found")
    return session


@router.delete("/{scan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_scan(scan_id: str, container: AppContainer = Depends(get_container)) -> Response:
    if not await container.history.delete(scan_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Scan not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_scans(container: AppContainer = Depends(get_container)) -> Response:
    await container.history.clear()
    logger.info("Scan history cleared.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
