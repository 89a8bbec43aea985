from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import CurrentUser, get_event_sync_service, get_registration_service
from app.schemas.events import (
    EventListResponse,
    RegisterForEventRequest,
    RegistrationListResponse,
    RegistrationResponse,
)
from app.services.event_sync_service import EventSyncService
from app.services.registration_service import RegistrationService

events_router = APIRouter(prefix="/events")


@events_router.get("", response_model=EventListResponse)
async def list_events(
        event_sync: Annotated[EventSyncService, Depends(get_event_sync_service)],
):
    """Live ticketing events, mirrored into the local store. Empty on any upstream failure."""
    return {"events": await event_sync.sync_events()}


@events_router.get("/registered", response_model=RegistrationListResponse)
async def list_registered_events(
        current_user: CurrentUser,
        registration_service: Annotated[RegistrationService, Depends(get_registration_service)],
):
    return {"registrations": registration_service.list_registrations(current_user.id)}


@events_router.post("/{event_id}/register", response_model=RegistrationResponse)
async def register_for_event(
        event_id: int,
        current_user: CurrentUser,
        registration_service: Annotated[RegistrationService, Depends(get_registration_service)],
        body: RegisterForEventRequest | None = None,
):
    registration = registration_service.register(
        current_user.id,
        event_id,
        eventbrite_order_id=body.eventbrite_order_id if body else None,
    )
    return {"registration": registration}
