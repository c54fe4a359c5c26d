"""
Training session model.

A session is one logged run, entered by hand or imported from Strava.
"""

import enum

from sqlalchemy import Column, DateTime, Integer, Float, BigInteger, String, Text

from app.models.base import Base
from app.shared.dates import utcnow


class SessionSource(str, enum.Enum):
    """Who owns (created) a session."""

    MANUAL = "manual"
    EXTERNAL = "external"


class TrainingSession(Base):
    """
    A logged run.

    Sessions with an external_activity_id mirror exactly one Strava
    activity and are only written by webhook reconciliation. Manual
    sessions never carry an external id.
    """

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)

    date = Column(DateTime, nullable=False, index=True)
    distance = Column(Float, nullable=False)  # kilometers
    duration = Column(Integer, nullable=False)  # seconds
    notes = Column(Text, nullable=True)

    # Strava activity ID for imported sessions
    external_activity_id = Column(BigInteger, unique=True, nullable=True)
    source = Column(String(16), nullable=False, default=SessionSource.MANUAL.value)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_external(self) -> bool:
        return self.source == SessionSource.EXTERNAL.value

    def __repr__(self):
        return f"<TrainingSession {self.id} {self.source} {self.distance}km>"
