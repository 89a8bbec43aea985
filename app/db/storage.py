from datetime import datetime, timezone
from typing import Dict, List, Optional

from loguru import logger

from app.core.exceptions import ConflictError
from app.db.models.activity import Activity
from app.db.models.event import Event, EventRegistration, EventRegistrationWithEvent
from app.db.models.membership import Membership
from app.db.models.users import User
from app.schemas.activities import ActivityCreate
from app.schemas.events import EventCreate, EventRegistrationCreate
from app.schemas.membership import MembershipCreate, MembershipUpdate
from app.schemas.users import UserCreate, UserUpdate


ENTITY_TYPES = ("user", "membership", "event", "registration", "activity", "ticket")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemStorage:
    """
    Process-lifetime keyed-map store.

    Ids are assigned per entity type from counters starting at 1 and are never
    reused. None of the methods awaits, so on a single event loop a counter
    increment and the matching map write cannot interleave with another request.
    """

    def __init__(self):
        self.users: Dict[int, User] = {}
        self.memberships: Dict[int, Membership] = {}
        self.events: Dict[int, Event] = {}
        self.registrations: Dict[int, EventRegistration] = {}
        self.activities: Dict[int, Activity] = {}
        self._counters: Dict[str, int] = {name: 0 for name in ENTITY_TYPES}

    def next_id(self, entity: str) -> int:
        self._counters[entity] += 1
        return self._counters[entity]

    # Users ---------------------------------------------------------------

    def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        return next((user for user in self.users.values() if user.email.lower() == email), None)

    def create_user(self, data: UserCreate) -> User:
        if self.get_user_by_email(data.email):
            raise ConflictError("A user with this email already exists")
        values = data.model_dump()
        values["created_at"] = values["created_at"] or utcnow()
        user = User(id=self.next_id("user"), **values)
        self.users[user.id] = user
        logger.debug(f"User created: {user.email} (ID: {user.id})")
        return user

    def update_user(self, user_id: int, updates: UserUpdate | dict) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        if isinstance(updates, UserUpdate):
            updates = updates.model_dump(exclude_unset=True)
        new_email = updates.get("email")
        if new_email:
            owner = self.get_user_by_email(new_email)
            if owner is not None and owner.id != user_id:
                raise ConflictError("A user with this email already exists")
        updated = user.model_copy(update=updates)
        self.users[user_id] = updated
        return updated

    # Memberships ---------------------------------------------------------

    def get_membership_by_user_id(self, user_id: int) -> Optional[Membership]:
        return next((m for m in self.memberships.values() if m.user_id == user_id), None)

    def create_membership(self, data: MembershipCreate) -> Membership:
        membership = Membership(id=self.next_id("membership"), **data.model_dump())
        self.memberships[membership.id] = membership
        return membership

    def update_membership(self, membership_id: int, updates: MembershipUpdate) -> Optional[Membership]:
        membership = self.memberships.get(membership_id)
        if membership is None:
            return None
        updated = membership.model_copy(update=updates.model_dump(exclude_unset=True))
        self.memberships[membership_id] = updated
        return updated

    # Events --------------------------------------------------------------

    def get_all_events(self) -> List[Event]:
        return list(self.events.values())

    def get_upcoming_events(self, now: datetime | None = None) -> List[Event]:
        now = now or utcnow()
        upcoming = [event for event in self.events.values() if event.start_date > now]
        return sorted(upcoming, key=lambda event: event.start_date)

    def get_event(self, event_id: int) -> Optional[Event]:
        return self.events.get(event_id)

    def get_event_by_eventbrite_id(self, eventbrite_id: str) -> Optional[Event]:
        return next((e for e in self.events.values() if e.eventbrite_id == eventbrite_id), None)

    def create_event(self, data: EventCreate) -> Event:
        event = Event(id=self.next_id("event"), **data.model_dump())
        self.events[event.id] = event
        return event

    def update_event(self, event_id: int, data: EventCreate) -> Optional[Event]:
        event = self.events.get(event_id)
        if event is None:
            return None
        updated = Event(id=event_id, **data.model_dump())
        self.events[event_id] = updated
        return updated

    def upsert_event(self, data: EventCreate) -> Event:
        """Insert, or update in place keeping the local id, keyed by the external id."""
        existing = self.get_event_by_eventbrite_id(data.eventbrite_id)
        if existing is not None:
            return self.update_event(existing.id, data)
        return self.create_event(data)

    # Registrations -------------------------------------------------------

    def get_event_registrations_by_user_id(self, user_id: int) -> List[EventRegistrationWithEvent]:
        result = []
        for registration in self.registrations.values():
            if registration.user_id != user_id:
                continue
            event = self.events.get(registration.event_id)
            if event is None:
                continue
            result.append(EventRegistrationWithEvent(**registration.model_dump(), event=event))
        return result

    def get_event_registration(self, user_id: int, event_id: int) -> Optional[EventRegistration]:
        return next(
            (r for r in self.registrations.values() if r.user_id == user_id and r.event_id == event_id),
            None,
        )

    def create_event_registration(self, data: EventRegistrationCreate) -> EventRegistration:
        if self.get_event_registration(data.user_id, data.event_id):
            raise ConflictError("Already registered for this event")
        registration = EventRegistration(
            id=self.next_id("registration"),
            registration_date=utcnow(),
            **data.model_dump(),
        )
        self.registrations[registration.id] = registration
        return registration

    # Activities ----------------------------------------------------------

    def get_activities_by_user_id(self, user_id: int, limit: int = 10) -> List[Activity]:
        activities = [a for a in self.activities.values() if a.user_id == user_id]
        activities.sort(key=lambda activity: (activity.created_at, activity.id), reverse=True)
        return activities[:limit]

    def create_activity(self, data: ActivityCreate, created_at: datetime | None = None) -> Activity:
        activity = Activity(
            id=self.next_id("activity"),
            created_at=created_at or utcnow(),
            **data.model_dump(),
        )
        self.activities[activity.id] = activity
        return activity
