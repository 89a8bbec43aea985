from typing import List, Optional

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import UpstreamError, UpstreamUnavailableError
from app.db.models.event import Event
from app.db.storage import MemStorage
from app.schemas.eventbrite import EventbriteEvent
from app.schemas.events import DashboardEvent, EventCreate
from app.services.eventbrite_client import EventbriteClient

UNTITLED_EVENT = "Untitled Event"
ONLINE_LOCATION = "Online"


def event_location(event: EventbriteEvent) -> Optional[str]:
    if event.venue and event.venue.address and event.venue.address.localized_address_display:
        return event.venue.address.localized_address_display
    if event.online_event:
        return ONLINE_LOCATION
    return None


def minimum_price(event: EventbriteEvent) -> Optional[int]:
    availability = event.ticket_availability
    if availability and availability.minimum_ticket_price:
        return availability.minimum_ticket_price.value
    return None


def normalize_event(event: EventbriteEvent) -> EventCreate:
    """Flatten a ticketing event into the local Event shape."""
    return EventCreate(
        eventbrite_id=event.id,
        title=(event.name.text if event.name else None) or UNTITLED_EVENT,
        description=(event.description.text if event.description else None) or None,
        start_date=event.start.utc,
        end_date=event.end.utc if event.end else None,
        location=event_location(event),
        is_virtual=bool(event.online_event),
        price=minimum_price(event),
        max_attendees=event.capacity,
    )


def to_dashboard_event(event: EventbriteEvent) -> DashboardEvent:
    is_free = event.is_free
    if is_free is None:
        price = minimum_price(event)
        is_free = price == 0 if price is not None else None
    return DashboardEvent(
        id=event.id,
        name=(event.name.text if event.name else None) or UNTITLED_EVENT,
        description=(event.description.text if event.description else None) or None,
        url=event.url,
        start_date=event.start.utc.isoformat().replace("+00:00", "Z"),
        end_date=event.end.utc.isoformat().replace("+00:00", "Z") if event.end else None,
        status=event.status,
        is_free=is_free,
        location=event_location(event),
        venue_name=event.venue.name if event.venue else None,
    )


class EventSyncService:

    def __init__(self, storage: MemStorage, eventbrite: EventbriteClient):
        self.storage = storage
        self.eventbrite = eventbrite

    def upsert(self, event: EventbriteEvent) -> Event:
        return self.storage.upsert_event(normalize_event(event))

    async def sync_events(self) -> List[Event]:
        """
        Mirror the organization's live events into the store.

        Never raises for upstream trouble: missing credentials or a failed
        listing are logged and yield an empty list.
        """
        if not self.eventbrite.configured:
            logger.error("Eventbrite API credentials (organization id or private token) are not configured.")
            return []

        try:
            remote_events = await self.eventbrite.list_organization_events(
                expand=["venue", "ticket_availability"]
            )
        except (UpstreamError, UpstreamUnavailableError) as e:
            logger.error(f"Eventbrite API error: {e.message}")
            return []
        except PydanticValidationError as e:
            logger.error(f"Unexpected Eventbrite event listing payload: {e}")
            return []

        stored = [self.upsert(remote_event) for remote_event in remote_events]
        logger.info(f"Upserted {len(stored)} events from Eventbrite")
        return stored

    async def list_dashboard_events(self) -> List[DashboardEvent]:
        """Live events in dashboard shape. Upstream errors propagate to the caller."""
        remote_events = await self.eventbrite.list_organization_events(
            expand=["venue", "ticket_availability"]
        )
        return [to_dashboard_event(remote_event) for remote_event in remote_events]
