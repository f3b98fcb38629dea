"""
Persistence for scan history and the dietary profile.

  SqlScanHistoryStore / SqlDietaryProfileStore : async SQLAlchemy, one JSON
      document per row (tables from labelscan.models)
  InMemoryScanHistoryStore / InMemoryDietaryProfileStore : process-local,
      used by tests and embedded callers

Every SQL error surfaces as PersistenceFailure so callers can tell "analysis
worked but could not be saved" apart from "analysis failed". Stores never
retry; retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from labelscan.models.dietary_profile import DietaryProfileRecord
from labelscan.models.scan_session import ScanSessionRecord
from labelscan.schemas.dietary import DietaryProfile
from labelscan.schemas.scan import ScanSession
from labelscan.services.dietary_engine import default_profile

if TYPE_CHECKING:
    from labelscan.schemas.scan import ScanResult

logger = logging.getLogger(__name__)


class PersistenceFailure(Exception):
    """
    A store read or write failed.
    `result` carries the finished ScanResult when only the final save failed.
    """

    def __init__(self, message: str, result: Optional["ScanResult"] = None) -> None:
        super().__init__(message)
        self.result = result


class ScanHistoryStore(Protocol):
    async def get(self, session_id: str) -> Optional[ScanSession]: ...
    async def upsert(self, session: ScanSession) -> None: ...
    async def delete(self, session_id: str) -> bool: ...
    async def list(self, limit: Optional[int] = None) -> list[ScanSession]: ...
    async def clear(self) -> None: ...


class DietaryProfileStore(Protocol):
    async def load(self) -> DietaryProfile: ...
    async def save(self, profile: DietaryProfile) -> None: ...


# ── SQL ───────────────────────────────────────────────────────────────────────


class SqlScanHistoryStore:
    """Keeps at most `max_history` sessions; the oldest are pruned on insert."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], max_history: int = 50) -> None:
        self._session_factory = session_factory
        self._max_history = max_history

    async def get(self, session_id: str) -> Optional[ScanSession]:
        try:
            async with self._session_factory() as db:
                record = await db.get(ScanSessionRecord, session_id)
        except SQLAlchemyError as exc:
            raise PersistenceFailure(f"Failed to load scan {session_id}: {exc}") from exc
        return ScanSession.model_validate(record.payload) if record else None

    async def upsert(self, session: ScanSession) -> None:
        payload = session.model_dump(mode="json")
        try:
            async with self._session_factory() as db:
                record = await db.get(ScanSessionRecord, session.id)
                if record is None:
                    db.add(
                        ScanSessionRecord(
                            id=session.id,
                            status=session.status,
                            payload=payload,
                            created_at=session.created_at,
                            updated_at=session.updated_at,
                        )
                    )
                    await db.flush()
                    await self._prune(db)
                else:
                    record.status = session.status
                    record.payload = payload
                    record.updated_at = session.updated_at
                await db.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to save scan %s: %s", session.id, exc)
            raise PersistenceFailure(f"Failed to save scan {session.id}: {exc}") from exc

    async def _prune(self, db: AsyncSession) -> None:
        count = await db.scalar(select(func.count()).select_from(ScanSessionRecord))
        excess = (count or 0) - self._max_history
        if excess <= 0:
            return
        oldest = (
            await db.scalars(
                select(ScanSessionRecord.id)
                .order_by(ScanSessionRecord.created_at.asc())
                .limit(excess)
            )
        ).all()
        await db.execute(delete(ScanSessionRecord).where(ScanSessionRecord.id.in_(oldest)))
        logger.debug("Pruned %d old scan(s) from history.", len(oldest))

    async def delete(self, session_id: str) -> bool:
        try:
            async with self._session_factory() as db:
                result = await db.execute(
                    delete(ScanSessionRecord).where(ScanSessionRecord.id == session_id)
                )
                await db.commit()
        except SQLAlchemyError as exc:
            raise PersistenceFailure(f"Failed to delete scan {session_id}: {exc}") from exc
        return result.rowcount > 0

    async def list(self, limit: Optional[int] = None) -> list[ScanSession]:
        """Most recent first."""
        stmt = select(ScanSessionRecord).order_by(ScanSessionRecord.created_at.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            async with self._session_factory() as db:
                records = (await db.scalars(stmt)).all()
        except SQLAlchemyError as exc:
            raise PersistenceFailure(f"Failed to list scans: {exc}") from exc
        return [ScanSession.model_validate(r.payload) for r in records]

    async def clear(self) -> None:
        try:
            async with self._session_factory() as db:
                await db.execute(delete(ScanSessionRecord))
                await db.commit()
        except SQLAlchemyError as exc:
            raise PersistenceFailure(f"Failed to clear scan history: {exc}") from exc


class SqlDietaryProfileStore:
    """One profile document per profile key; a missing row reads as the default profile."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], profile_key: str = "default") -> None:
        self._session_factory = session_factory
        self._profile_key = profile_key

    async def load(self) -> DietaryProfile:
        try:
            async with self._session_factory() as db:
                record = await db.get(DietaryProfileRecord, self._profile_key)
        except SQLAlchemyError as exc:
            raise PersistenceFailure(f"Failed to load dietary profile: {exc}") from exc
        if record is None:
            return default_profile()
        return DietaryProfile.model_validate(record.payload)

    async def save(self, profile: DietaryProfile) -> None:
        payload = profile.model_dump(mode="json")
        now = datetime.now(timezone.utc)
        try:
            async with self._session_factory() as db:
                record = await db.get(DietaryProfileRecord, self._profile_key)
                if record is None:
                    db.add(
                        DietaryProfileRecord(
                            profile_key=self._profile_key, payload=payload, updated_at=now
                        )
                    )
                else:
                    record.payload = payload
                    record.updated_at = now
                await db.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to save dietary profile %s: %s", self._profile_key, exc)
            raise PersistenceFailure(f"Failed to save dietary profile: {exc}") from exc


# ── In-memory ─────────────────────────────────────────────────────────────────


class InMemoryScanHistoryStore:
    def __init__(self, max_history: int = 50) -> None:
        self._max_history = max_history
        self._sessions: dict[str, ScanSession] = {}

    async def get(self, session_id: str) -> Optional[ScanSession]:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    async def upsert(self, session: ScanSession) -> None:
        is_new = session.id not in self._sessions
        self._sessions[session.id] = session.model_copy(deep=True)
        if is_new and len(self._sessions) > self._max_history:
            by_age = sorted(self._sessions.values(), key=lambda s: s.created_at)
            for stale in by_age[: len(self._sessions) - self._max_history]:
                del self._sessions[stale.id]

    async def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    async def list(self, limit: Optional[int] = None) -> list[ScanSession]:
        ordered = sorted(self._sessions.values(), key=lambda s: s.created_at, reverse=True)
        if limit is not None:
            ordered = ordered[:limit]
        return [s.model_copy(deep=True) for s in ordered]

    async def clear(self) -> None:
        self._sessions.clear()


class InMemoryDietaryProfileStore:
    def __init__(self, profile: Optional[DietaryProfile] = None) -> None:
        self._profile = profile.model_copy(deep=True) if profile else None

    async def load(self) -> DietaryProfile:
        if self._profile is None:
            return default_profile()
        return self._profile.model_copy(deep=True)

    async def save(self, profile: DietaryProfile) -> None:
        self._profile = profile.model_copy(deep=True)
