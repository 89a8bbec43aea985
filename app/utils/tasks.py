import asyncio

from loguru import logger

from app.services.event_sync_service import EventSyncService


async def periodic_event_sync_task(event_sync: EventSyncService, interval_sec: int):
    while True:
        try:
            logger.info("--- Starting Eventbrite event catalog synchronization ---")
            events = await event_sync.sync_events()
            logger.info(f"Event catalog synchronization finished, {len(events)} events mirrored")
        except Exception as e:
            logger.error(f"!!! Event catalog synchronization error: {e}")

        await asyncio.sleep(interval_sec)
