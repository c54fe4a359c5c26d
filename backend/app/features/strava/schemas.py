"""
Strava schemas.

Pydantic models for Strava API payloads, webhook events and
connection endpoints.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Strava API payloads
# =============================================================================

class TokenBundle(BaseModel):
    """Tokens returned by /oauth/token (code exchange or refresh)."""

    access_token: str
    refresh_token: str
    expires_at: int  # Unix timestamp
    athlete_id: Optional[int] = None  # Only present on code exchange

    @classmethod
    def from_response(cls, payload: dict) -> "TokenBundle":
        athlete = payload.get("athlete") or {}
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload["refresh_token"],
            expires_at=payload["expires_at"],
            athlete_id=athlete.get("id"),
        )


class StravaActivityData(BaseModel):
    """Subset of a Strava DetailedActivity needed to build a session."""

    id: int
    name: str = ""
    type: str
    distance: float = 0.0  # meters
    moving_time: int = 0  # seconds
    start_date: datetime
    private: bool = False

    @property
    def distance_km(self) -> float:
        return self.distance / 1000

    @property
    def is_run(self) -> bool:
        return self.type == "Run"


# =============================================================================
# Webhooks
# =============================================================================

class WebhookEvent(BaseModel):
    """
    Strava webhook push.

    `updates` values arrive as strings, e.g. {"private": "true"} or
    {"authorized": "false"}.
    """

    object_type: str  # "activity" | "athlete"
    aspect_type: str  # "create" | "update" | "delete"
    object_id: int
    owner_id: int
    event_time: Optional[int] = None
    subscription_id: Optional[int] = None
    updates: dict[str, Any] = Field(default_factory=dict)

    @field_validator("updates", mode="before")
    @classmethod
    def null_updates(cls, v):
        return v or {}


# =============================================================================
# Connection endpoints
# =============================================================================

class ConnectRequest(BaseModel):
    code: str = ""


class ConnectResponse(BaseModel):
    success: bool
    strava_athlete_id: int
    connected_at: Optional[datetime] = None


class ConnectionStatus(BaseModel):
    connected: bool
    strava_athlete_id: Optional[int] = None
    connected_at: Optional[datetime] = None
    last_sync: Optional[datetime] = None


class AuthorizeUrlResponse(BaseModel):
    url: str
