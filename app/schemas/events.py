from datetime import datetime

from pydantic import ConfigDict, Field

from app.db.models.event import Event, EventRegistration, EventRegistrationWithEvent
from app.schemas.base import CamelSchema


class EventCreate(CamelSchema):
    """Normalized ticketing event, ready to be upserted by its external id."""
    eventbrite_id: str = Field(..., min_length=1)
    title: str
    description: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    location: str | None = None
    is_virtual: bool = False
    price: int | None = None
    max_attendees: int | None = None


class EventRegistrationCreate(CamelSchema):
    user_id: int
    event_id: int
    ticket_number: str
    eventbrite_order_id: str | None = None


class RegisterForEventRequest(CamelSchema):
    model_config = ConfigDict(extra="ignore")

    eventbrite_order_id: str | None = None


class EventListResponse(CamelSchema):
    events: list[Event]


class RegistrationResponse(CamelSchema):
    registration: EventRegistration


class RegistrationListResponse(CamelSchema):
    registrations: list[EventRegistrationWithEvent]


class DashboardEvent(CamelSchema):
    """Ticketing event as shown on the dashboard, keyed by the external id."""
    id: str
    name: str
    description: str | None = None
    url: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    status: str | None = None
    is_free: bool | None = None
    location: str | None = None
    venue_name: str | None = None


class DashboardEventListResponse(CamelSchema):
    events: list[DashboardEvent]
