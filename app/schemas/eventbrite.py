"""Shapes of the ticketing (Eventbrite) payloads the portal consumes."""
from datetime import datetime, timezone as tz

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventbriteModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class TextField(EventbriteModel):
    text: str | None = None
    html: str | None = None


class DateTimeField(EventbriteModel):
    timezone: str | None = None
    local: str | None = None
    utc: datetime

    @field_validator("utc")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=tz.utc)
        return value.astimezone(tz.utc)


class Address(EventbriteModel):
    localized_address_display: str | None = None
    city: str | None = None


class Venue(EventbriteModel):
    name: str | None = None
    address: Address | None = None


class Money(EventbriteModel):
    value: int | None = None
    currency: str | None = None
    display: str | None = None


class TicketAvailability(EventbriteModel):
    has_available_tickets: bool | None = None
    minimum_ticket_price: Money | None = None


class EventbriteEvent(EventbriteModel):
    id: str
    name: TextField | None = None
    description: TextField | None = None
    url: str | None = None
    start: DateTimeField
    end: DateTimeField | None = None
    status: str | None = None
    online_event: bool | None = None
    is_free: bool | None = None
    capacity: int | None = None
    venue: Venue | None = None
    ticket_availability: TicketAvailability | None = None


class Pagination(EventbriteModel):
    has_more_items: bool = False
    continuation: str | None = None


class EventbriteEventPage(EventbriteModel):
    events: list[dict] = Field(default_factory=list)
    pagination: Pagination | None = None


class Attendee(EventbriteModel):
    id: str | None = None
    event_id: str | None = None
    order_id: str | None = None
