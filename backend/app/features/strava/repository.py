"""
Strava repositories.

Data access layer for Strava connections. Every lookup is keyed by
Strava athlete ID.
"""

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from app.shared.dates import utcnow
from .models import StravaConnection


class StravaConnectionRepository(BaseRepository[StravaConnection]):
    """Repository for Strava OAuth connections."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, StravaConnection)

    async def get_by_athlete_id(self, athlete_id: int) -> StravaConnection | None:
        """
        Get connection by Strava athlete ID.

        Returns:
            StravaConnection if found, None otherwise
        """
        return await self.get_by(strava_athlete_id=athlete_id)

    async def get_sole_connection(self) -> StravaConnection | None:
        """
        Return the only stored connection (single-user deployments).

        Returns None when there are zero or several connections; callers
        then have to name the athlete explicitly.
        """
        result = await self.db.execute(select(StravaConnection).limit(2))
        connections = list(result.scalars().all())
        if len(connections) != 1:
            return None
        return connections[0]

    async def reload(self, connection: StravaConnection) -> StravaConnection | None:
        """Re-read a connection from the database, bypassing the identity map."""
        result = await self.db.execute(
            select(StravaConnection)
            .where(StravaConnection.strava_athlete_id == connection.strava_athlete_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_connection(
        self,
        athlete_id: int,
        access_token: str,
        refresh_token: str,
        expires_at: int,
        user_id: int | None = None
    ) -> StravaConnection:
        """Store a new connection. Tokens must already be encrypted."""
        return await self.create(
            user_id=user_id,
            strava_athlete_id=athlete_id,
            access_token=access_token,
            refresh_token=refresh_token,
            token_expires_at=expires_at,
            connected_at=utcnow(),
        )

    async def update_tokens(
        self,
        athlete_id: int,
        access_token: str,
        refresh_token: str,
        expires_at: int
    ) -> None:
        """
        Overwrite OAuth tokens after refresh.

        Args:
            athlete_id: Strava athlete ID
            access_token: New encrypted access token
            refresh_token: New encrypted refresh token
            expires_at: Token expiration timestamp
        """
        await self.db.execute(
            update(StravaConnection)
            .where(StravaConnection.strava_athlete_id == athlete_id)
            .values(
                access_token=access_token,
                refresh_token=refresh_token,
                token_expires_at=expires_at,
            )
        )
        await self.db.flush()

    async def mark_synced(self, athlete_id: int) -> None:
        """Stamp last_sync_at after a successful reconciliation."""
        await self.db.execute(
            update(StravaConnection)
            .where(StravaConnection.strava_athlete_id == athlete_id)
            .values(last_sync_at=utcnow())
        )
        await self.db.flush()

    async def delete_by_athlete_id(self, athlete_id: int) -> int:
        """
        Delete connection for athlete.

        Returns:
            Number of rows deleted
        """
        result = await self.db.execute(
            delete(StravaConnection)
            .where(StravaConnection.strava_athlete_id == athlete_id)
        )
        await self.db.flush()
        return result.rowcount or 0
