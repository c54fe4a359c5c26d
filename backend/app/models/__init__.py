"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy.

Note: Feature models are imported lazily to avoid circular imports.
Use direct imports from features/ modules when possible.
"""

from app.models.base import Base


# Lazy import functions to avoid circular imports
def _get_session_models():
    """Lazy import of training session models."""
    from app.features.sessions.models import TrainingSession
    return TrainingSession


def _get_goal_models():
    """Lazy import of goal models."""
    from app.features.goals.models import Goal
    return Goal


def _get_strava_models():
    """Lazy import of Strava models."""
    from app.features.strava.models import StravaConnection
    return StravaConnection


def register_models() -> None:
    """Import every model module so Base.metadata knows all tables."""
    _get_session_models()
    _get_goal_models()
    _get_strava_models()


# Expose as module-level attributes for convenience
def __getattr__(name):
    if name == "TrainingSession":
        return _get_session_models()
    if name == "Goal":
        return _get_goal_models()
    if name == "StravaConnection":
        return _get_strava_models()

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Base",
    "TrainingSession",
    "Goal",
    "StravaConnection",
    "register_models",
]
