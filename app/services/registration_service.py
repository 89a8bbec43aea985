import uuid
from datetime import datetime, timezone
from typing import List, Optional

from loguru import logger

from app.core.config import RegistrationConfig
from app.core.exceptions import ConflictError, NotFoundError
from app.db.models.event import EventRegistration, EventRegistrationWithEvent
from app.db.storage import MemStorage
from app.schemas.activities import ActivityCreate
from app.schemas.events import EventRegistrationCreate


def make_ticket_number(prefix: str, year: int, sequence: int) -> str:
    return f"{prefix}{year}-{sequence:06d}"


class RegistrationService:
    """Local event sign-up. Nothing is reserved on the ticketing side."""

    def __init__(self, storage: MemStorage, config: RegistrationConfig):
        self.storage = storage
        self.config = config

    def list_registrations(self, user_id: int) -> List[EventRegistrationWithEvent]:
        return self.storage.get_event_registrations_by_user_id(user_id)

    def register(
        self,
        user_id: int,
        event_id: int,
        eventbrite_order_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> EventRegistration:
        if self.storage.get_event_registration(user_id, event_id):
            logger.warning(f"User {user_id} is already registered for event {event_id}")
            raise ConflictError("Already registered for this event")

        event = self.storage.get_event(event_id)
        if event is None:
            raise NotFoundError("Event not found")

        now = now or datetime.now(timezone.utc)
        ticket_number = make_ticket_number(
            self.config.ticket_prefix, now.year, self.storage.next_id("ticket")
        )
        registration = self.storage.create_event_registration(EventRegistrationCreate(
            user_id=user_id,
            event_id=event_id,
            ticket_number=ticket_number,
            eventbrite_order_id=eventbrite_order_id or f"eventbrite_{uuid.uuid4().hex}",
        ))

        self.storage.create_activity(ActivityCreate(
            user_id=user_id,
            type="registration",
            description=f"Registration confirmed for {event.title}",
        ))
        logger.info(f"User {user_id} registered for event {event_id}, ticket {ticket_number}")
        return registration
