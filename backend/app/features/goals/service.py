"""
Goal service.

Joins goals with the sessions logged inside their window.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.features.sessions import SessionRepository, SessionResponse
from .models import Goal
from .progress import calculate_goal_progress
from .repository import GoalRepository
from .schemas import GoalProgressResponse


class GoalService:
    """
    Usage:
        service = GoalService(db)
        progress = await service.get_progress(goal_id)
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.goals = GoalRepository(db)
        self.sessions = SessionRepository(db)

    async def build_progress(
        self,
        goal: Goal,
        now: Optional[datetime] = None
    ) -> GoalProgressResponse:
        sessions = await self.sessions.get_in_range(goal.start_date, goal.end_date)
        progress = calculate_goal_progress(goal, sessions, now=now)

        return GoalProgressResponse(
            id=goal.id,
            target_distance=goal.target_distance,
            start_date=goal.start_date,
            end_date=goal.end_date,
            created_at=goal.created_at,
            updated_at=goal.updated_at,
            current_distance=progress.current_distance,
            progress_percentage=progress.progress_percentage,
            expected_distance=progress.expected_distance,
            status=progress.status,
            sessions=[SessionResponse.model_validate(s) for s in progress.sessions],
        )

    async def get_progress(self, goal_id: int) -> GoalProgressResponse | None:
        goal = await self.goals.get_by_id(goal_id)
        if goal is None:
            return None
        return await self.build_progress(goal)

    async def list_progress(self) -> list[GoalProgressResponse]:
        goals = await self.goals.get_recent()
        return [await self.build_progress(goal) for goal in goals]
