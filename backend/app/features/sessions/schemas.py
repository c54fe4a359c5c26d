"""
Training session schemas.

Pydantic models for session requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class SessionCreate(BaseModel):
    """Create or replace a manual session."""

    date: datetime
    distance: float = Field(gt=0)  # kilometers
    duration: int = Field(gt=0)  # seconds
    notes: str = ""


class SessionResponse(BaseModel):
    """Session response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    date: datetime
    distance: float
    duration: int
    notes: Optional[str]
    external_activity_id: Optional[int] = None
    source: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
