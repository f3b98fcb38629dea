"""Health check endpoints — used by load balancers and uptime monitoring."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from labelscan.container import AppContainer, get_container
from labelscan.database import check_db_connectivity

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Liveness probe — returns 200 if the process is running."""
    return {"status": "ok", "version": "1.0.0"}


@router.get("/ready")
async def ready(container: AppContainer = Depends(get_container)) -> JSONResponse:
    """
    Readiness probe — checks DB connectivity and that the knowledge base loaded.
    Returns 200 with {"db": "ok", "knowledge_base": "ok"} when fully ready,
    or 503 with the failing component marked "error".
    """
    status: dict[str, str] = {}

    db_ok = await check_db_connectivity()
    status["db"] = "ok" if db_ok else "error"

    kb_ok = len(container.knowledge_base) > 0
    status["knowledge_base"] = "ok" if kb_ok else "error"
    if not kb_ok:
        logger.warning("Knowledge base is empty.")

    http_status = 200 if db_ok and kb_ok else 503
    return JSONResponse(content=status, status_code=http_status)
