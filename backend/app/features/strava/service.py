"""
Strava connection management.

Connect (OAuth code exchange), status and disconnect for the
user-facing endpoints.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from .errors import StravaDecodeError
from .models import StravaConnection
from .oauth import StravaOAuth
from .repository import StravaConnectionRepository
from .schemas import ConnectionStatus
from .tokens import TokenVault

logger = logging.getLogger(__name__)


class StravaConnectionService:
    """
    Usage:
        service = StravaConnectionService(db)
        connection = await service.connect(code)
        status = await service.get_status()
    """

    def __init__(
        self,
        db: AsyncSession,
        oauth: Optional[StravaOAuth] = None,
        vault: Optional[TokenVault] = None,
    ):
        self.db = db
        self.connections = StravaConnectionRepository(db)
        self.oauth = oauth or StravaOAuth()
        self.vault = vault or TokenVault.from_settings()

    async def connect(self, code: str) -> StravaConnection:
        """
        Exchange an authorization code and store the encrypted tokens.

        Reconnecting an athlete overwrites the stored tokens.

        Raises:
            StravaConfigError, StravaAPIError, StravaTransportError,
            StravaDecodeError, TokenError
        """
        # Fail before spending the one-time code
        self.vault.require_key()

        bundle = await self.oauth.exchange_code(code)
        if bundle.athlete_id is None:
            raise StravaDecodeError("Token exchange response has no athlete")

        sealed_access = self.vault.seal(bundle.access_token)
        sealed_refresh = self.vault.seal(bundle.refresh_token)

        existing = await self.connections.get_by_athlete_id(bundle.athlete_id)
        if existing:
            await self.connections.update_tokens(
                bundle.athlete_id,
                sealed_access,
                sealed_refresh,
                bundle.expires_at,
            )
            connection = await self.connections.reload(existing)
        else:
            connection = await self.connections.create_connection(
                athlete_id=bundle.athlete_id,
                access_token=sealed_access,
                refresh_token=sealed_refresh,
                expires_at=bundle.expires_at,
            )

        await self.db.commit()

        logger.info(
            f"Strava connected: athlete_id={bundle.athlete_id} "
            f"(tokens encrypted, reconnect={existing is not None})"
        )
        return connection

    async def resolve_connection(
        self,
        athlete_id: Optional[int] = None
    ) -> StravaConnection | None:
        """
        Find the connection a request refers to.

        An explicit athlete ID is looked up by key. Without one, a
        single-user deployment resolves its sole connection.
        """
        if athlete_id is not None:
            return await self.connections.get_by_athlete_id(athlete_id)
        return await self.connections.get_sole_connection()

    async def get_status(self, athlete_id: Optional[int] = None) -> ConnectionStatus:
        connection = await self.resolve_connection(athlete_id)
        if connection is None:
            return ConnectionStatus(connected=False)

        return ConnectionStatus(
            connected=True,
            strava_athlete_id=connection.strava_athlete_id,
            connected_at=connection.connected_at,
            last_sync=connection.last_sync_at,
        )

    async def disconnect(self, athlete_id: Optional[int] = None) -> int | None:
        """
        Delete the stored connection.

        Returns:
            Athlete ID that was disconnected, None if nothing was connected
        """
        connection = await self.resolve_connection(athlete_id)
        if connection is None:
            return None

        disconnected_id = connection.strava_athlete_id
        await self.connections.delete_by_athlete_id(disconnected_id)
        await self.db.commit()

        logger.info(f"Strava connection deleted for athlete {disconnected_id}")
        return disconnected_id
