"""
Distance goals module.

Usage:
    from app.features.goals import Goal, GoalService

Components:
- Goal: Target distance over a date range
- GoalRepository: Data access for goals
- GoalService: Goal progress (derived from sessions)
"""

from .models import Goal
from .schemas import GoalCreate, GoalResponse, GoalProgressResponse
from .repository import GoalRepository
from .progress import GoalProgress, calculate_goal_progress
from .service import GoalService

__all__ = [
    "Goal",
    "GoalCreate",
    "GoalResponse",
    "GoalProgressResponse",
    "GoalRepository",
    "GoalProgress",
    "calculate_goal_progress",
    "GoalService",
]
