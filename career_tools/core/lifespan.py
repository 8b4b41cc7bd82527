import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging

from career_tools.ai.factory import close_ai_client
from career_tools.core.config import settings
from career_tools.core.quota import get_quota_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=settings.quota_purge_interval_seconds)
            except asyncio.TimeoutError:
                pass
            try:
                purged = get_quota_store().purge_expired()
                if purged:
                    logger.info("quota_window_purge purged=%s", purged)
            except Exception as exc:  # pragma: no cover - purge failures must not stop the loop
                logger.warning("quota_window_purge_failed: %s", exc)

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
    await close_ai_client()
