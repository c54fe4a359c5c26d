"""
Strava token lifecycle.

- TokenVault: encrypts/decrypts tokens with the configured key
- TokenManager: hands out a usable access token, refreshing lazily

Refresh flow:
1. Decrypt stored access token
2. Still valid for more than the skew window -> return it, no network
3. Otherwise decrypt refresh token, call Strava, encrypt the new pair,
   commit it, and only then return the new access token

Refreshes for the same athlete are serialized inside one process. Two
processes may still both refresh; the last write wins.
"""

import asyncio
import logging
import time
from collections import defaultdict
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.shared.crypto import CryptoError, encrypt, decrypt
from .errors import (
    StravaConfigError,
    StravaError,
    TokenDecryptionError,
    TokenError,
    TokenPersistError,
    TokenRefreshError,
)
from .models import StravaConnection
from .oauth import StravaOAuth
from .repository import StravaConnectionRepository

logger = logging.getLogger(__name__)

# athlete_id -> lock guarding the refresh round-trip
_refresh_locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)


class TokenVault:
    """
    Encrypts tokens for storage and decrypts them for use.

    The key is checked lazily so that a missing ENCRYPTION_KEY fails the
    operation that needs it, not application startup.
    """

    def __init__(self, key: Optional[str] = None):
        self._key = key

    @classmethod
    def from_settings(cls) -> "TokenVault":
        return cls(settings.encryption_key)

    def require_key(self) -> str:
        if not self._key:
            raise StravaConfigError("ENCRYPTION_KEY must be set")
        return self._key

    def seal(self, token: str) -> str:
        try:
            return encrypt(token, self.require_key())
        except CryptoError as e:
            raise TokenError(f"Failed to encrypt token: {e}") from e

    def open(self, ciphertext: str) -> str:
        try:
            return decrypt(ciphertext, self.require_key())
        except CryptoError as e:
            raise TokenDecryptionError(f"Failed to decrypt token: {e}") from e


class TokenManager:
    """
    Provides valid Strava access tokens for stored connections.

    Usage:
        manager = TokenManager(StravaConnectionRepository(db))
        access_token = await manager.ensure_valid_access_token(connection)
    """

    def __init__(
        self,
        connections: StravaConnectionRepository,
        oauth: Optional[StravaOAuth] = None,
        vault: Optional[TokenVault] = None,
        clock: Callable[[], float] = time.time,
        skew_seconds: Optional[int] = None,
    ):
        self.connections = connections
        self.oauth = oauth or StravaOAuth()
        self.vault = vault or TokenVault.from_settings()
        self.clock = clock
        self.skew_seconds = (
            skew_seconds if skew_seconds is not None
            else settings.token_refresh_skew_seconds
        )

    def needs_refresh(self, connection: StravaConnection) -> bool:
        return connection.expires_within(self.skew_seconds, self.clock())

    async def ensure_valid_access_token(self, connection: StravaConnection) -> str:
        """
        Get a plaintext access token for the connection.

        Raises:
            StravaConfigError: Key or client credentials missing
            TokenDecryptionError: Stored token cannot be decrypted
            TokenRefreshError: Strava refresh failed
            TokenPersistError: New tokens could not be saved
        """
        access_token = self.vault.open(connection.access_token)
        if not self.needs_refresh(connection):
            return access_token

        athlete_id = connection.strava_athlete_id
        async with _refresh_locks[athlete_id]:
            current = await self.connections.reload(connection)
            if current is None:
                raise TokenRefreshError(
                    f"Connection for athlete {athlete_id} removed during refresh"
                )

            # Another task refreshed while we were waiting
            if not self.needs_refresh(current):
                return self.vault.open(current.access_token)

            return await self._refresh(current)

    async def _refresh(self, connection: StravaConnection) -> str:
        athlete_id = connection.strava_athlete_id
        logger.info(f"Token expired or expiring soon, refreshing for athlete {athlete_id}")

        refresh_token = self.vault.open(connection.refresh_token)

        try:
            bundle = await self.oauth.refresh_token(refresh_token)
        except StravaConfigError:
            raise
        except StravaError as e:
            raise TokenRefreshError(
                f"Failed to refresh token for athlete {athlete_id}: {e}"
            ) from e

        sealed_access = self.vault.seal(bundle.access_token)
        sealed_refresh = self.vault.seal(bundle.refresh_token)

        try:
            await self.connections.update_tokens(
                athlete_id,
                sealed_access,
                sealed_refresh,
                bundle.expires_at,
            )
            await self.connections.db.commit()
        except SQLAlchemyError as e:
            await self.connections.db.rollback()
            raise TokenPersistError(
                f"Failed to store refreshed tokens for athlete {athlete_id}"
            ) from e

        logger.info(f"Token refreshed successfully for athlete {athlete_id}")
        return bundle.access_token
