"""
Background webhook processing.

Strava expects a webhook response within 2 seconds, so each accepted
event is handed to its own asyncio task and the request returns at once.
Tasks are fire-and-forget: no ordering, no deduplication, no retry.
Failures only show up in the logs.
"""

import asyncio
import logging
from typing import Callable, Optional

from ..schemas import WebhookEvent
from ..webhooks import StravaWebhookProcessor

logger = logging.getLogger(__name__)


class WebhookDispatcher:
    """
    Spawns one background task per webhook event.

    Usage:
        dispatcher = WebhookDispatcher(AsyncSessionLocal)
        dispatcher.dispatch(event)   # returns immediately
        ...
        await dispatcher.shutdown()
    """

    def __init__(
        self,
        db_factory: Optional[Callable] = None,
        processor_factory: Callable = StravaWebhookProcessor,
    ):
        self._db_factory = db_factory
        self._processor_factory = processor_factory
        # Keep strong references to running tasks to prevent GC
        self._tasks: set[asyncio.Task] = set()

    def configure(self, db_factory: Callable) -> None:
        self._db_factory = db_factory

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def dispatch(self, event: WebhookEvent) -> asyncio.Task:
        """Schedule processing of one event; never awaited by the caller."""
        task = asyncio.create_task(self._run(event))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, event: WebhookEvent) -> None:
        if self._db_factory is None:
            logger.error("Webhook dispatcher has no database factory configured")
            return

        try:
            async with self._db_factory() as db:
                processor = self._processor_factory(db)
                result = await processor.process_event(event)
                logger.info(
                    f"Webhook event processed: type={event.object_type}, "
                    f"aspect={event.aspect_type}, object_id={event.object_id}, "
                    f"result={result}"
                )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                f"Failed to process webhook event: type={event.object_type}, "
                f"aspect={event.aspect_type}, object_id={event.object_id}, "
                f"owner_id={event.owner_id}: {e!r}"
            )

    async def shutdown(self) -> None:
        """Cancel tasks still running at application stop."""
        if not self._tasks:
            return

        logger.info(f"Cancelling {len(self._tasks)} pending webhook tasks")
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


# Global dispatcher instance (configured on startup)
webhook_dispatcher = WebhookDispatcher()


def get_webhook_dispatcher() -> WebhookDispatcher:
    """Dependency for the webhook route."""
    return webhook_dispatcher
