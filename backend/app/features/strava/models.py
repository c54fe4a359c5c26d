"""
Strava-related database models.

Models:
- StravaConnection: OAuth credentials for one Strava athlete
"""

from sqlalchemy import Column, DateTime, Integer, BigInteger, Text

from app.models.base import Base
from app.shared.dates import utcnow


class StravaConnection(Base):
    """
    Strava OAuth connection.

    One row per Strava athlete. Access and refresh tokens are stored
    encrypted (AES-256-GCM, see app.shared.crypto) and never leave the
    backend in plaintext.
    """

    __tablename__ = "strava_connections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Reserved for multi-user deployments
    user_id = Column(Integer, nullable=True)

    # Strava athlete info
    strava_athlete_id = Column(BigInteger, unique=True, nullable=False, index=True)

    # Encrypted OAuth tokens
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=False)
    token_expires_at = Column(Integer, nullable=False)  # Unix timestamp

    # Timestamps
    connected_at = Column(DateTime, default=utcnow)
    last_sync_at = Column(DateTime, nullable=True)

    def expires_within(self, seconds: int, now_ts: float) -> bool:
        """True if the access token expires less than `seconds` from now_ts."""
        return now_ts + seconds >= self.token_expires_at

    def __repr__(self):
        return f"<StravaConnection athlete_id={self.strava_athlete_id}>"
