"""
Strava webhook routes.

- GET  /webhooks/strava - Subscription verification handshake
- POST /webhooks/strava - Event delivery

Strava expects an answer within 2 seconds, so events are acknowledged
immediately and reconciled in the background.
"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from app.config import settings
from app.features.strava import WebhookEvent
from app.features.strava.sync import WebhookDispatcher, get_webhook_dispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


@router.get("/strava")
async def verify_webhook(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
):
    """
    Verify webhook subscription with Strava.

    Echoes hub.challenge when the verify token matches the configured one.
    """
    expected_token = settings.strava_webhook_verify_token
    if not expected_token:
        logger.error("STRAVA_VERIFY_TOKEN is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error"
        )

    token_matches = hub_verify_token is not None and hmac.compare_digest(
        hub_verify_token.encode(), expected_token.encode()
    )
    if hub_mode == "subscribe" and token_matches:
        logger.info("Webhook verification successful")
        return {"hub.challenge": hub_challenge}

    logger.warning(f"Webhook verification failed: mode={hub_mode}")
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Verification failed"
    )


@router.post("/strava", response_class=PlainTextResponse)
async def receive_webhook_event(
    request: Request,
    dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher),
):
    """Acknowledge a Strava event and process it in the background."""
    body = await request.body()

    try:
        event = WebhookEvent.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Invalid webhook payload: {e.error_count()} errors")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid event payload"
        )

    logger.info(
        f"Webhook event: type={event.object_type}, aspect={event.aspect_type}, "
        f"object_id={event.object_id}, owner_id={event.owner_id}"
    )
    dispatcher.dispatch(event)

    return PlainTextResponse("EVENT_RECEIVED", status_code=status.HTTP_200_OK)
