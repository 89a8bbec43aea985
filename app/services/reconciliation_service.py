import asyncio
from typing import Awaitable, Callable, List, Optional, TypeVar

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from app.core.config import HubSpotConfig
from app.core.exceptions import UpstreamError, UpstreamUnavailableError
from app.db.models.event import Event
from app.db.models.users import User
from app.schemas.eventbrite import EventbriteEvent
from app.services.eventbrite_client import EventbriteClient
from app.services.event_sync_service import EventSyncService
from app.services.hubspot_client import HubSpotClient
from app.services.identity_service import IdentityService

T = TypeVar("T")
R = TypeVar("R")

PER_ITEM_ERRORS = (UpstreamError, PydanticValidationError)


class ReconciliationService:
    """
    Works out which ticketing events a member is registered for.

    The CRM only links a contact to custom "registration" objects; each of
    those carries a ticketing attendee number, and each attendee points to one
    event. Lookups per attendee and per event are independent, so one failing
    item is logged and skipped while the rest are still returned.
    """

    def __init__(
        self,
        identity: IdentityService,
        hubspot: HubSpotClient,
        eventbrite: EventbriteClient,
        event_sync: EventSyncService,
        config: HubSpotConfig,
        max_concurrency: int = 1,
    ):
        self.identity = identity
        self.hubspot = hubspot
        self.eventbrite = eventbrite
        self.event_sync = event_sync
        self.config = config
        self.max_concurrency = max(1, max_concurrency)

    async def _fetch_each(
        self,
        items: List[T],
        fetch: Callable[[T], Awaitable[R]],
        what: str,
    ) -> List[Optional[R]]:
        """Run ``fetch`` for every item with bounded concurrency; failed items become None."""
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run(item: T) -> Optional[R]:
            async with semaphore:
                try:
                    return await fetch(item)
                except PER_ITEM_ERRORS as e:
                    logger.warning(f"Failed to fetch Eventbrite {what} {item}: {e}")
                    return None

        return list(await asyncio.gather(*(run(item) for item in items)))

    async def registered_events(self, user: User) -> List[Event]:
        if not self.eventbrite.config.private_token:
            raise UpstreamUnavailableError("Eventbrite API not configured.")

        contact_id = await self.identity.resolve_contact_id(user)

        object_type = self.config.registration_object_type
        associations = await self.hubspot.list_contact_associations(contact_id, object_type)
        object_ids = list(dict.fromkeys(
            assoc.to_object_id
            for assoc in associations.results
            if assoc.has_type(self.config.registration_association_type_id)
        ))
        if not object_ids:
            logger.debug(f"No Eventbrite registrations associated with contact {contact_id}")
            return []

        attendee_property = self.config.attendee_property
        batch = await self.hubspot.batch_read(object_type, object_ids, [attendee_property])
        attendee_ids = [
            record.prop(attendee_property)
            for record in batch.results
            if record.prop(attendee_property)
        ]
        if not attendee_ids:
            return []

        attendees = await self._fetch_each(attendee_ids, self.eventbrite.get_attendee, "attendee")
        event_ids = []
        for attendee_id, attendee in zip(attendee_ids, attendees):
            if attendee is None:
                continue
            if not attendee.event_id:
                logger.warning(f"Eventbrite attendee {attendee_id} has no event id")
                continue
            event_ids.append(attendee.event_id)

        # group tickets: several attendees of one contact can share an event
        unique_event_ids = list(dict.fromkeys(event_ids))
        if not unique_event_ids:
            return []

        async def fetch_event(event_id: str) -> EventbriteEvent:
            return await self.eventbrite.get_event(event_id, expand=["venue", "ticket_availability"])

        remote_events = await self._fetch_each(unique_event_ids, fetch_event, "event")
        events = [
            self.event_sync.upsert(remote_event)
            for remote_event in remote_events
            if remote_event is not None
        ]

        logger.info(f"Resolved {len(events)} registered events for contact {contact_id}")
        return sorted(events, key=lambda event: event.start_date)
