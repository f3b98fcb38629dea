"""DietaryProfile ORM model — a single JSON document per profile key."""

from sqlalchemy import Column, JSON, String, TIMESTAMP

from labelscan.database import Base


class DietaryProfileRecord(Base):
    """
    Stores a user's dietary preferences and custom avoidances.
    The mobile app has no accounts, so profiles are keyed by a device/profile key.
    """

    __tablename__ = "dietary_profiles"

    profile_key = Column(String(64), primary_key=True)
    payload = Column(JSON, nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False)
