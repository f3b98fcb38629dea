"""SQLAlchemy ORM models package."""

from labelscan.database import Base
from labelscan.models.dietary_profile import DietaryProfileRecord
from labelscan.models.scan_session import ScanSessionRecord

__all__ = ["Base", "DietaryProfileRecord", "ScanSessionRecord"]
