"""
Strava background processing.

Provides:
- WebhookDispatcher: fire-and-forget task per webhook event
"""

from .background import (
    WebhookDispatcher,
    webhook_dispatcher,
    get_webhook_dispatcher,
)

__all__ = [
    "WebhookDispatcher",
    "webhook_dispatcher",
    "get_webhook_dispatcher",
]
