"""
Strava connection routes.

Endpoints:
- GET    /strava/authorize-url  - OAuth consent page URL
- POST   /strava/connect        - Exchange OAuth code, store tokens
- GET    /strava/status         - Check connection status
- DELETE /strava/disconnect     - Delete stored connection

Failures are returned as generic 500s; details go to the log only.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.session import get_async_db
from app.features.strava import (
    AuthorizeUrlResponse,
    ConnectionStatus,
    ConnectRequest,
    ConnectResponse,
    StravaConfigError,
    StravaConnectionService,
    StravaError,
    StravaOAuth,
    TokenVault,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/strava", tags=["Strava"])


# =============================================================================
# Dependencies
# =============================================================================

def get_strava_oauth() -> StravaOAuth:
    return StravaOAuth()


def get_token_vault() -> TokenVault:
    return TokenVault.from_settings()


def get_connection_service(
    db: AsyncSession = Depends(get_async_db),
    oauth: StravaOAuth = Depends(get_strava_oauth),
    vault: TokenVault = Depends(get_token_vault),
) -> StravaConnectionService:
    return StravaConnectionService(db, oauth=oauth, vault=vault)


# =============================================================================
# OAuth Flow
# =============================================================================

@router.get("/authorize-url", response_model=AuthorizeUrlResponse)
async def get_authorize_url(oauth: StravaOAuth = Depends(get_strava_oauth)):
    """URL of the Strava consent page (scope activity:read)."""
    try:
        if not settings.strava_redirect_uri:
            raise StravaConfigError("STRAVA_REDIRECT_URI must be set")
        url = oauth.get_authorization_url(redirect_uri=settings.strava_redirect_uri)
    except StravaConfigError as e:
        logger.error(f"Strava authorize URL unavailable: {e}")
        raise HTTPException(status_code=500, detail="Server configuration error")

    return AuthorizeUrlResponse(url=url)


@router.post("/connect", response_model=ConnectResponse, status_code=201)
async def connect_strava(
    request: ConnectRequest,
    service: StravaConnectionService = Depends(get_connection_service)
):
    """
    Connect a Strava account.

    Exchanges the OAuth code from the consent redirect and stores the
    encrypted tokens. Reconnecting replaces the stored tokens.
    """
    if not request.code:
        raise HTTPException(status_code=400, detail="Authorization code is required")

    try:
        connection = await service.connect(request.code)
    except StravaConfigError as e:
        logger.error(f"Strava connect failed, configuration: {e}")
        raise HTTPException(status_code=500, detail="Server configuration error")
    except StravaError as e:
        logger.error(f"Strava connect failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to connect Strava")

    return ConnectResponse(
        success=True,
        strava_athlete_id=connection.strava_athlete_id,
        connected_at=connection.connected_at,
    )


# =============================================================================
# Status & Disconnect
# =============================================================================

@router.get("/status", response_model=ConnectionStatus)
async def get_strava_status(
    athlete_id: Optional[int] = Query(None, description="Strava athlete ID"),
    service: StravaConnectionService = Depends(get_connection_service)
):
    """Check Strava connection status."""
    return await service.get_status(athlete_id)


@router.delete("/disconnect")
async def disconnect_strava(
    athlete_id: Optional[int] = Query(None, description="Strava athlete ID"),
    service: StravaConnectionService = Depends(get_connection_service)
):
    """Delete the stored Strava connection and its tokens."""
    disconnected_id = await service.disconnect(athlete_id)
    if disconnected_id is None:
        raise HTTPException(status_code=404, detail="Strava is not connected")

    return {"success": True, "strava_athlete_id": disconnected_id}
