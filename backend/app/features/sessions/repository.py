"""
Training session repository.

Manual CRUD plus the external-id accessors used by webhook reconciliation.
"""

from datetime import datetime

from sqlalchemy import select, desc, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from app.shared.dates import to_naive_utc, utcnow
from .models import TrainingSession, SessionSource


class SessionRepository(BaseRepository[TrainingSession]):
    """Repository for training sessions."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, TrainingSession)

    async def get_in_range(
        self,
        start: datetime,
        end: datetime
    ) -> list[TrainingSession]:
        """
        Get sessions with start <= date <= end.

        Returns:
            Sessions ordered by date (newest first)
        """
        result = await self.db.execute(
            select(TrainingSession)
            .where(TrainingSession.date >= to_naive_utc(start))
            .where(TrainingSession.date <= to_naive_utc(end))
            .order_by(desc(TrainingSession.date))
        )
        return list(result.scalars().all())

    async def create_manual(
        self,
        date: datetime,
        distance: float,
        duration: int,
        notes: str
    ) -> TrainingSession:
        """Create a hand-entered session."""
        return await self.create(
            date=to_naive_utc(date),
            distance=distance,
            duration=duration,
            notes=notes,
            source=SessionSource.MANUAL.value,
        )

    async def update_fields(
        self,
        session: TrainingSession,
        date: datetime,
        distance: float,
        duration: int,
        notes: str
    ) -> TrainingSession:
        """Overwrite the user-visible fields; source and external id are untouched."""
        return await self.update(
            session,
            date=to_naive_utc(date),
            distance=distance,
            duration=duration,
            notes=notes,
            updated_at=utcnow(),
        )

    # -------------------------------------------------------------------------
    # External (Strava) sessions
    # -------------------------------------------------------------------------

    async def get_by_external_id(self, activity_id: int) -> TrainingSession | None:
        """
        Get session imported from a Strava activity.

        Args:
            activity_id: Strava activity ID

        Returns:
            TrainingSession if found, None otherwise
        """
        return await self.get_by(external_activity_id=activity_id)

    async def create_external(
        self,
        activity_id: int,
        date: datetime,
        distance: float,
        duration: int,
        notes: str
    ) -> TrainingSession:
        """Create a session owned by Strava sync."""
        return await self.create(
            date=to_naive_utc(date),
            distance=distance,
            duration=duration,
            notes=notes,
            external_activity_id=activity_id,
            source=SessionSource.EXTERNAL.value,
        )

    async def update_external(
        self,
        activity_id: int,
        date: datetime,
        distance: float,
        duration: int,
        notes: str
    ) -> TrainingSession | None:
        """
        Update the session mirroring a Strava activity.

        Returns:
            Updated session, None if no session has this activity ID
        """
        session = await self.get_by_external_id(activity_id)
        if session is None:
            return None
        return await self.update_fields(session, date, distance, duration, notes)

    async def delete_by_external_id(self, activity_id: int) -> int:
        """
        Delete the session mirroring a Strava activity.

        Returns:
            Number of rows deleted (0 when already gone)
        """
        result = await self.db.execute(
            delete(TrainingSession)
            .where(TrainingSession.external_activity_id == activity_id)
        )
        await self.db.flush()
        return result.rowcount or 0
