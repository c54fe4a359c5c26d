"""
Strava integration module.

Usage:
    from app.features.strava import StravaConnectionService, StravaWebhookProcessor
    from app.features.strava.sync import webhook_dispatcher

Components:
- StravaOAuth: OAuth flow (auth URL, token exchange, refresh)
- StravaClient: API client (single activity fetch)
- TokenVault / TokenManager: encrypted token storage and lazy refresh
- StravaWebhookProcessor: webhook event -> session reconciliation
- StravaConnectionService: connect, status, disconnect

Models:
- StravaConnection: Encrypted OAuth tokens for one athlete
"""

from .models import StravaConnection
from .errors import (
    StravaError,
    StravaConfigError,
    StravaAPIError,
    StravaTransportError,
    StravaDecodeError,
    TokenError,
    TokenDecryptionError,
    TokenRefreshError,
    TokenPersistError,
)
from .schemas import (
    TokenBundle,
    StravaActivityData,
    WebhookEvent,
    ConnectRequest,
    ConnectResponse,
    ConnectionStatus,
    AuthorizeUrlResponse,
)
from .oauth import StravaOAuth
from .client import StravaClient
from .repository import StravaConnectionRepository
from .tokens import TokenVault, TokenManager
from .webhooks import StravaWebhookProcessor
from .service import StravaConnectionService

__all__ = [
    # Models
    "StravaConnection",
    # Errors
    "StravaError",
    "StravaConfigError",
    "StravaAPIError",
    "StravaTransportError",
    "StravaDecodeError",
    "TokenError",
    "TokenDecryptionError",
    "TokenRefreshError",
    "TokenPersistError",
    # Schemas
    "TokenBundle",
    "StravaActivityData",
    "WebhookEvent",
    "ConnectRequest",
    "ConnectResponse",
    "ConnectionStatus",
    "AuthorizeUrlResponse",
    # OAuth / client
    "StravaOAuth",
    "StravaClient",
    # Repositories
    "StravaConnectionRepository",
    # Tokens
    "TokenVault",
    "TokenManager",
    # Services
    "StravaWebhookProcessor",
    "StravaConnectionService",
]
