"""
Goal repository.
"""

from datetime import datetime

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from app.shared.dates import to_naive_utc
from .models import Goal


class GoalRepository(BaseRepository[Goal]):
    """Repository for distance goals."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Goal)

    async def create_goal(
        self,
        target_distance: float,
        start_date: datetime,
        end_date: datetime
    ) -> Goal:
        return await self.create(
            target_distance=target_distance,
            start_date=to_naive_utc(start_date),
            end_date=to_naive_utc(end_date),
        )

    async def get_recent(self) -> list[Goal]:
        """All goals, most recently created first."""
        result = await self.db.execute(
            select(Goal).order_by(desc(Goal.created_at), desc(Goal.id))
        )
        return list(result.scalars().all())
