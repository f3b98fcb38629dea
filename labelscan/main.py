"""
LabelScan — FastAPI application entry point.
Lifespan: create DB tables → verify connectivity → build the service container.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from labelscan.config import settings
from labelscan.container import build_container
from labelscan.database import AsyncSessionLocal, check_db_connectivity, create_all, engine
from labelscan.routers import dietary, health, ingredients, scans
from labelscan.services.dietary_engine import InvalidProfile, UnknownAvoidance, UnknownPreference
from labelscan.services.ocr import ExtractionFailure
from labelscan.services.scan_pipeline import ScanSuperseded
from labelscan.services.stores import PersistenceFailure

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.
    1. Create all tables (idempotent).
    2. Verify DB connectivity.
    3. Load the knowledge base and wire every service once.
    """
    logger.info("Starting LabelScan (env=%s, ocr=%s)", settings.app_env, settings.ocr_backend)

    await create_all()
    logger.info("Database tables created/verified.")

    if await check_db_connectivity():
        logger.info("Database connectivity verified.")
    else:
        logger.error("Database connectivity check FAILED at startup.")

    app.state.container = build_container(settings, AsyncSessionLocal)

    yield

    logger.info("Shutting down LabelScan.")
    await engine.dispose()


app = FastAPI(
    title="LabelScan",
    description="Ingredient-label text extraction, safety classification and dietary personalization.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(scans.router)
app.include_router(dietary.router)
app.include_router(ingredients.router)


# ── Exception handlers ───────────────────────────────────────────────────────


def _error(status_code: int, detail: str, code: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, "code": code, **extra})


@app.exception_handler(ExtractionFailure)
async def extraction_failure_handler(request: Request, exc: ExtractionFailure) -> JSONResponse:
    return _error(422, str(exc), "EXTRACTION_FAILED")


@app.exception_handler(PersistenceFailure)
async def persistence_failure_handler(request: Request, exc: PersistenceFailure) -> JSONResponse:
    logger.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc)
    # Analysis finished but could not be saved: hand the result back anyway
    result = exc.result.model_dump(mode="json") if exc.result is not None else None
    return _error(503, "Storage unavailable", "PERSISTENCE_FAILURE", result=result)


@app.exception_handler(ScanSuperseded)
async def scan_superseded_handler(request: Request, exc: ScanSuperseded) -> JSONResponse:
    return _error(409, str(exc), "SCAN_SUPERSEDED")


@app.exception_handler(UnknownPreference)
async def unknown_preference_handler(request: Request, exc: UnknownPreference) -> JSONResponse:
    return _error(404, f"Unknown dietary preference: {exc.args[0]}", "PREFERENCE_NOT_FOUND")


@app.exception_handler(UnknownAvoidance)
async def unknown_avoidance_handler(request: Request, exc: UnknownAvoidance) -> JSONResponse:
    return _error(404, f"Unknown custom avoidance: {exc.args[0]}", "AVOIDANCE_NOT_FOUND")


@app.exception_handler(InvalidProfile)
async def invalid_profile_handler(request: Request, exc: InvalidProfile) -> JSONResponse:
    return _error(422, str(exc), "INVALID_PROFILE")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a machine-readable error for any unhandled exception."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url)
    return _error(500, "Internal server error", "LABELSCAN_UNAVAILABLE")
