from datetime import datetime

from app.db.models.base import BaseRecord


class Event(BaseRecord):
    eventbrite_id: str
    title: str
    description: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    location: str | None = None
    is_virtual: bool = False
    price: int | None = None # minor currency units (cents)
    max_attendees: int | None = None


class EventRegistration(BaseRecord):
    user_id: int
    event_id: int
    ticket_number: str
    registration_date: datetime
    eventbrite_order_id: str | None = None


class EventRegistrationWithEvent(EventRegistration):
    event: Event
