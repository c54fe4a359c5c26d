"""
Strava API client.

Provides methods for interacting with the Strava REST API.
Each call uses its own httpx client with a bounded timeout.

Data Policy:
- We only keep date, distance, moving time and name of runs
- GPS coordinates and maps are never stored
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from app.config import settings
from .errors import StravaAPIError, StravaDecodeError, StravaTransportError
from .schemas import StravaActivityData

logger = logging.getLogger(__name__)


class StravaClient:
    """
    Async client for Strava API.

    Usage:
        client = StravaClient()
        activity = await client.get_activity(access_token, activity_id)
    """

    API_URL = "https://www.strava.com/api/v3"

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout if timeout is not None else settings.strava_http_timeout
        self._transport = transport

    async def _api_request(
        self,
        method: str,
        endpoint: str,
        access_token: str,
        params: Optional[dict] = None
    ) -> dict:
        """
        Make an authenticated API request.

        Raises:
            StravaAPIError: If API returns a non-2xx status
            StravaTransportError: On network failure or timeout
            StravaDecodeError: If the body is not JSON
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport
            ) as client:
                response = await client.request(
                    method=method,
                    url=f"{self.API_URL}{endpoint}",
                    headers={"Authorization": f"Bearer {access_token}"},
                    params=params
                )
        except httpx.HTTPError as e:
            raise StravaTransportError(f"{method} {endpoint} failed: {e}") from e

        # Log rate limit headers from Strava
        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if not response.is_success:
            raise StravaAPIError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise StravaDecodeError(f"{method} {endpoint}: response is not JSON") from e

    async def get_activity(
        self,
        access_token: str,
        activity_id: int
    ) -> StravaActivityData:
        """
        Get current state of an activity.

        Raises:
            StravaAPIError, StravaTransportError, StravaDecodeError
        """
        data = await self._api_request(
            "GET",
            f"/activities/{activity_id}",
            access_token,
            params={"include_all_efforts": "false"}
        )

        try:
            return StravaActivityData.model_validate(data)
        except ValidationError as e:
            raise StravaDecodeError(
                f"Activity {activity_id}: unexpected payload"
            ) from e
