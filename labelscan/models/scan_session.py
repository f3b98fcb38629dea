"""ScanSession ORM model — one row per scan, full session stored as JSON."""

from sqlalchemy import Column, JSON, String, TIMESTAMP, Index

from labelscan.database import Base


class ScanSessionRecord(Base):
    """
    Persisted scan session. The status column is denormalised out of the
    payload so history can be filtered without decoding JSON.
    """

    __tablename__ = "scan_sessions"

    id = Column(String(64), primary_key=True)
    status = Column(String(16), nullable=False)  # pending|processing|completed|failed
    payload = Column(JSON, nullable=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (Index("idx_scan_sessions_created_at", "created_at"),)
