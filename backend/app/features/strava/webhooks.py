"""
Strava webhook reconciliation.

Turns webhook events into create/update/delete of local sessions so the
running log matches what Strava currently shows.

Strava delivers at least once and in no particular order, so:
- a create for an activity we already have is a no-op
- an update for an activity we don't have is treated as a create
- a delete for an activity we don't have is a no-op

Only runs are imported. An activity retyped away from "Run" or made
private is purged (we only hold activity:read, so private activities
are not ours to keep).

Every handler returns a small result dict ({"status": ..., ...}) and
raises on failure; the dispatcher logs failures and never retries.
"""

import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.sessions import SessionRepository
from .client import StravaClient
from .models import StravaConnection
from .repository import StravaConnectionRepository
from .schemas import StravaActivityData, WebhookEvent
from .tokens import TokenManager

logger = logging.getLogger(__name__)


class StravaWebhookProcessor:
    """
    Applies one webhook event to the local store.

    Usage:
        processor = StravaWebhookProcessor(db)
        result = await processor.process_event(event)
    """

    def __init__(
        self,
        db: AsyncSession,
        client: Optional[StravaClient] = None,
        token_manager: Optional[TokenManager] = None,
    ):
        self.db = db
        self.connections = StravaConnectionRepository(db)
        self.sessions = SessionRepository(db)
        self.client = client or StravaClient()
        self.tokens = token_manager or TokenManager(self.connections)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    async def process_event(self, event: WebhookEvent) -> dict:
        if event.object_type == "activity":
            return await self._process_activity_event(event)
        if event.object_type == "athlete":
            return await self._process_athlete_event(event)

        logger.info(f"Unknown object type: {event.object_type}")
        return {"status": "ignored", "reason": "unknown_object_type"}

    async def _process_activity_event(self, event: WebhookEvent) -> dict:
        if event.aspect_type == "create":
            return await self.handle_activity_created(event.object_id, event.owner_id)
        if event.aspect_type == "update":
            return await self.handle_activity_updated(
                event.object_id, event.owner_id, event.updates
            )
        if event.aspect_type == "delete":
            return await self.handle_activity_deleted(event.object_id, event.owner_id)

        logger.info(f"Unknown aspect type: {event.aspect_type}")
        return {"status": "ignored", "reason": "unknown_aspect_type"}

    async def _process_athlete_event(self, event: WebhookEvent) -> dict:
        # Strava sends "authorized": "false" as a string
        if event.aspect_type == "update" and event.updates.get("authorized") == "false":
            return await self.handle_athlete_deauthorized(event.owner_id)
        return {"status": "ignored", "reason": "athlete_event"}

    # -------------------------------------------------------------------------
    # Activity handlers
    # -------------------------------------------------------------------------

    async def handle_activity_created(self, activity_id: int, owner_id: int) -> dict:
        logger.info(f"Processing activity created: activity_id={activity_id}, owner_id={owner_id}")

        connection = await self.connections.get_by_athlete_id(owner_id)
        if connection is None:
            logger.info(f"No connection found for athlete {owner_id}")
            return {"status": "skipped", "reason": "untracked_athlete"}

        activity = await self._fetch_activity(connection, activity_id)
        return await self._create_session(connection, activity_id, activity)

    async def handle_activity_updated(
        self,
        activity_id: int,
        owner_id: int,
        updates: dict[str, Any]
    ) -> dict:
        logger.info(
            f"Processing activity updated: activity_id={activity_id}, "
            f"owner_id={owner_id}, fields={sorted(updates)}"
        )

        connection = await self.connections.get_by_athlete_id(owner_id)
        if connection is None:
            logger.info(f"No connection found for athlete {owner_id}")
            return {"status": "skipped", "reason": "untracked_athlete"}

        activity = await self._fetch_activity(connection, activity_id)

        if not activity.is_run:
            logger.info(f"Activity {activity_id} is now {activity.type}, removing session")
            return await self.handle_activity_deleted(activity_id, owner_id)

        if updates.get("private") == "true":
            logger.info(f"Activity {activity_id} became private, removing session")
            return await self.handle_activity_deleted(activity_id, owner_id)

        session = await self.sessions.update_external(
            activity_id,
            date=activity.start_date,
            distance=activity.distance_km,
            duration=activity.moving_time,
            notes=activity.name,
        )
        if session is None:
            # Create event missed or still in flight
            logger.info(f"No session for activity {activity_id}, treating update as create")
            return await self._create_session(connection, activity_id, activity)

        await self.connections.mark_synced(owner_id)
        await self.db.commit()

        logger.info(f"Updated session {session.id} for activity {activity_id}")
        return {"status": "updated", "session_id": session.id}

    async def handle_activity_deleted(
        self,
        activity_id: int,
        owner_id: Optional[int] = None
    ) -> dict:
        logger.info(f"Processing activity deleted: activity_id={activity_id}")

        deleted = await self.sessions.delete_by_external_id(activity_id)
        if not deleted:
            await self.db.commit()
            logger.info(f"No session for activity {activity_id}, nothing to delete")
            return {"status": "skipped", "reason": "not_found"}

        if owner_id is not None:
            await self.connections.mark_synced(owner_id)
        await self.db.commit()

        logger.info(f"Deleted session for activity {activity_id}")
        return {"status": "deleted"}

    # -------------------------------------------------------------------------
    # Athlete handlers
    # -------------------------------------------------------------------------

    async def handle_athlete_deauthorized(self, athlete_id: int) -> dict:
        logger.info(f"Processing athlete deauthorized: athlete_id={athlete_id}")

        await self.connections.delete_by_athlete_id(athlete_id)
        await self.db.commit()

        logger.info(f"Deleted connection for athlete {athlete_id}")
        return {"status": "deauthorized"}

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _fetch_activity(
        self,
        connection: StravaConnection,
        activity_id: int
    ) -> StravaActivityData:
        access_token = await self.tokens.ensure_valid_access_token(connection)
        return await self.client.get_activity(access_token, activity_id)

    async def _create_session(
        self,
        connection: StravaConnection,
        activity_id: int,
        activity: StravaActivityData
    ) -> dict:
        if not activity.is_run:
            logger.info(f"Skipping non-running activity: type={activity.type}")
            return {"status": "skipped", "reason": "not_a_run"}

        existing = await self.sessions.get_by_external_id(activity_id)
        if existing is not None:
            logger.info(f"Session already exists for activity {activity_id}")
            return {"status": "skipped", "reason": "duplicate", "session_id": existing.id}

        try:
            session = await self.sessions.create_external(
                activity_id=activity_id,
                date=activity.start_date,
                distance=activity.distance_km,
                duration=activity.moving_time,
                notes=activity.name,
            )
            await self.connections.mark_synced(connection.strava_athlete_id)
            await self.db.commit()
        except IntegrityError:
            # A concurrent delivery inserted the same activity first
            await self.db.rollback()
            logger.info(f"Session for activity {activity_id} created concurrently")
            return {"status": "skipped", "reason": "duplicate"}

        logger.info(f"Created session {session.id} from Strava activity {activity_id}")
        return {"status": "created", "session_id": session.id}
