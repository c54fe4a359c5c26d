"""
Strava OAuth flow.

Handles:
- Authorization URL generation
- Code exchange for tokens
- Token refresh
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from app.config import settings
from .errors import (
    StravaAPIError,
    StravaConfigError,
    StravaDecodeError,
    StravaTransportError,
)
from .schemas import TokenBundle

logger = logging.getLogger(__name__)


class StravaOAuth:
    """
    Strava OAuth handler.

    Usage:
        oauth = StravaOAuth()
        auth_url = oauth.get_authorization_url(
            redirect_uri="https://example.com/callback",
        )
        tokens = await oauth.exchange_code(code)
        tokens = await oauth.refresh_token(refresh_token)
    """

    AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
    TOKEN_URL = "https://www.strava.com/oauth/token"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id if client_id is not None else settings.strava_client_id
        self.client_secret = (
            client_secret if client_secret is not None else settings.strava_client_secret
        )
        self.timeout = timeout if timeout is not None else settings.strava_http_timeout
        self._transport = transport

    def get_authorization_url(
        self,
        redirect_uri: str,
        state: Optional[str] = None,
        scope: str = "activity:read"
    ) -> str:
        """
        Generate Strava OAuth authorization URL.

        Scopes:
        - activity:read - View activities (excluding private)
        - activity:read_all - View all activities (including private)

        We only request activity:read, so activities turned private
        disappear from our view and are purged on update.
        """
        if not self.client_id:
            raise StravaConfigError("STRAVA_CLIENT_ID must be set")

        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": scope,
            "approval_prompt": "auto"  # "force" to always show consent
        }
        if state:
            params["state"] = state

        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> TokenBundle:
        """
        Exchange authorization code for tokens.

        Args:
            code: Authorization code from Strava callback

        Returns:
            TokenBundle including the athlete ID

        Raises:
            StravaConfigError: If client id/secret are not set
            StravaAPIError: If Strava rejects the exchange
            StravaTransportError: On network failure or timeout
            StravaDecodeError: If the response is not a token payload
        """
        return await self._token_request(
            {"code": code, "grant_type": "authorization_code"},
            action="Token exchange",
        )

    async def refresh_token(self, refresh_token: str) -> TokenBundle:
        """
        Refresh an expired access token.

        Strava may rotate the refresh token; always store the returned one.

        Raises:
            Same as exchange_code
        """
        return await self._token_request(
            {"refresh_token": refresh_token, "grant_type": "refresh_token"},
            action="Token refresh",
        )

    async def _token_request(self, data: dict, action: str) -> TokenBundle:
        if not self.client_id or not self.client_secret:
            raise StravaConfigError(
                "STRAVA_CLIENT_ID and STRAVA_CLIENT_SECRET must be set"
            )

        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            **data,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport
            ) as client:
                response = await client.post(self.TOKEN_URL, data=payload)
        except httpx.HTTPError as e:
            raise StravaTransportError(f"{action} request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Strava {action.lower()} failed: status={response.status_code}")
            raise StravaAPIError(
                response.status_code,
                response.text,
                message=f"{action} failed",
            )

        try:
            return TokenBundle.from_response(response.json())
        except (ValueError, KeyError, TypeError, AttributeError, ValidationError) as e:
            raise StravaDecodeError(f"{action}: invalid token response") from e
