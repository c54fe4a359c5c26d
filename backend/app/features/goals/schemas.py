"""
Goal schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.features.sessions.schemas import SessionResponse
from app.shared.dates import to_naive_utc


class GoalCreate(BaseModel):
    """Create goal request."""

    target_distance: float = Field(gt=0)  # kilometers
    start_date: datetime
    end_date: datetime

    @model_validator(mode="after")
    def check_window(self) -> "GoalCreate":
        if to_naive_utc(self.end_date) < to_naive_utc(self.start_date):
            raise ValueError("end_date must not be before start_date")
        return self


class GoalResponse(BaseModel):
    """Goal response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    target_distance: float
    start_date: datetime
    end_date: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GoalProgressResponse(GoalResponse):
    """Goal with derived progress metrics."""

    current_distance: float
    progress_percentage: float
    expected_distance: float
    status: str
    sessions: list[SessionResponse] = []
