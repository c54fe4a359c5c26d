"""
Training session module.

Usage:
    from app.features.sessions import TrainingSession, SessionRepository

Models:
- TrainingSession: A logged run (manual or imported from Strava)

Repositories:
- SessionRepository: Manual CRUD and external-id accessors
"""

from .models import TrainingSession, SessionSource
from .schemas import SessionCreate, SessionResponse
from .repository import SessionRepository

__all__ = [
    # Models
    "TrainingSession",
    "SessionSource",
    # Schemas
    "SessionCreate",
    "SessionResponse",
    # Repositories
    "SessionRepository",
]
