from datetime import datetime, timedelta, timezone

from loguru import logger

from app.db.storage import MemStorage
from app.schemas.activities import ActivityCreate
from app.schemas.events import EventCreate, EventRegistrationCreate
from app.schemas.membership import MembershipCreate
from app.schemas.users import UserCreate
from app.services.registration_service import make_ticket_number


DEMO_EMAIL = "sarah.johnson@cleanpro.com"


def seed_demo_data(
    storage: MemStorage,
    password_hash: str,
    ticket_prefix: str = "CLA",
    now: datetime | None = None,
) -> None:
    """Load one demo member with a membership, three events and some history."""
    now = now or datetime.now(timezone.utc)

    user = storage.create_user(UserCreate(
        email=DEMO_EMAIL,
        first_name="Sarah",
        last_name="Johnson",
        phone="(555) 123-4567",
        hashed_password=password_hash,
        company_name="Clean Pro Laundromats",
        company_sector="Commercial Laundry",
        location_count=12,
        created_at=datetime(2020, 1, 15, tzinfo=timezone.utc),
    ))

    storage.create_membership(MembershipCreate(
        user_id=user.id,
        membership_id="CLA-2020-0847",
        type="Professional",
        status="Active",
        join_date=datetime(2020, 1, 15, tzinfo=timezone.utc),
        expiry_date=now + timedelta(days=45),
        hubspot_deal_id="hubspot_deal_456",
    ))

    conference = storage.create_event(EventCreate(
        eventbrite_id="eventbrite_123",
        title="Annual Conference",
        description="The premier event for laundry professionals",
        start_date=now + timedelta(days=30),
        end_date=now + timedelta(days=32),
        location="Las Vegas, NV",
        is_virtual=False,
        price=29500,
        max_attendees=500,
    ))
    storage.create_event(EventCreate(
        eventbrite_id="eventbrite_124",
        title="Regional Training Workshop",
        description="Hands-on training for equipment maintenance",
        start_date=now + timedelta(days=54),
        end_date=now + timedelta(days=54, hours=8),
        location="Chicago, IL",
        is_virtual=False,
        price=12500,
        max_attendees=50,
    ))
    storage.create_event(EventCreate(
        eventbrite_id="eventbrite_125",
        title="Equipment Safety Seminar",
        description="Virtual seminar on safety protocols",
        start_date=now + timedelta(days=88),
        end_date=now + timedelta(days=88, hours=2),
        location="Virtual Event",
        is_virtual=True,
        price=7500,
        max_attendees=100,
    ))

    storage.create_event_registration(EventRegistrationCreate(
        user_id=user.id,
        event_id=conference.id,
        ticket_number=make_ticket_number(ticket_prefix, now.year, storage.next_id("ticket")),
        eventbrite_order_id="eventbrite_order_789",
    ))

    history = [
        ("registration", f"Registration confirmed for {conference.title}", timedelta(days=3)),
        ("profile_update", "Profile updated - Company information changed", timedelta(days=5)),
        ("payment", "Payment processed for membership renewal", timedelta(days=8)),
    ]
    for activity_type, description, age in history:
        storage.create_activity(
            ActivityCreate(user_id=user.id, type=activity_type, description=description),
            created_at=now - age,
        )

    logger.info(f"Demo data loaded for {DEMO_EMAIL}")
