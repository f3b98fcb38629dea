"""Async SQLAlchemy engine, session factory, and Base declaration."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import text

from labelscan.config import settings


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
    pass


def _engine_kwargs(database_url: str) -> dict[str, Any]:
    """SQLite pools reject pool sizing arguments; only pass them to servers."""
    kwargs: dict[str, Any] = {
        "echo": (settings.app_env == "development" and settings.log_level.upper() == "DEBUG"),
        "pool_pre_ping": True,
    }
    if not database_url.startswith("sqlite"):
        kwargs.update(pool_size=10, max_overflow=20)
    return kwargs


engine = create_async_engine(settings.database_url, **_engine_kwargs(settings.database_url))

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def check_db_connectivity() -> bool:
    """Return True if a simple SELECT 1 succeeds."""
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception:
        return False


async def create_all() -> None:
    """Create every registered table (idempotent)."""
    # Imported for its side effect of registering the ORM models
    import labelscan.models  # noqa: F401, PLC0415

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
