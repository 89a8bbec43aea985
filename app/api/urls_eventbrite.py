from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import CurrentUser, get_event_sync_service, get_reconciliation_service
from app.schemas.events import DashboardEventListResponse, EventListResponse
from app.services.event_sync_service import EventSyncService
from app.services.reconciliation_service import ReconciliationService

eventbrite_router = APIRouter(prefix="/eventbrite")


@eventbrite_router.get("/events", response_model=DashboardEventListResponse)
async def list_dashboard_events(
        event_sync: Annotated[EventSyncService, Depends(get_event_sync_service)],
):
    """Live ticketing events as shown on the dashboard; 503 when not configured."""
    return {"events": await event_sync.list_dashboard_events()}


@eventbrite_router.get("/my-registered-events", response_model=EventListResponse)
async def list_my_registered_events(
        current_user: CurrentUser,
        reconciliation: Annotated[ReconciliationService, Depends(get_reconciliation_service)],
):
    """Events the member holds tickets for, found through the CRM registration records."""
    return {"events": await reconciliation.registered_events(current_user)}
