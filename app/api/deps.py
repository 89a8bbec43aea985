from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings
from app.core.exceptions import UnauthenticatedError
from app.db.models.users import User as DBUser
from app.db.storage import MemStorage
from app.services.auth_service import AuthService
from app.services.event_sync_service import EventSyncService
from app.services.eventbrite_client import EventbriteClient
from app.services.hubspot_client import HubSpotClient
from app.services.identity_service import IdentityService
from app.services.membership_service import MembershipService
from app.services.profile_service import ProfileService
from app.services.reconciliation_service import ReconciliationService
from app.services.registration_service import RegistrationService
from app.services.session_service import SessionService


# Shared objects live on app.state and are created once per application ---------

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> MemStorage:
    return request.app.state.storage


def get_session_service(request: Request) -> SessionService:
    return request.app.state.sessions


def get_hubspot_client(request: Request) -> HubSpotClient:
    return request.app.state.hubspot


def get_eventbrite_client(request: Request) -> EventbriteClient:
    return request.app.state.eventbrite


StorageDep = Annotated[MemStorage, Depends(get_storage)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
SessionsDep = Annotated[SessionService, Depends(get_session_service)]
HubSpotDep = Annotated[HubSpotClient, Depends(get_hubspot_client)]
EventbriteDep = Annotated[EventbriteClient, Depends(get_eventbrite_client)]


def session_token(request: Request, sessions: SessionsDep) -> str | None:
    return request.cookies.get(sessions.config.cookie_name)


def get_current_user(
    storage: StorageDep,
    sessions: SessionsDep,
    token: Annotated[str | None, Depends(session_token)],
) -> DBUser:
    record = sessions.resolve(token)
    user = storage.get_user(record.user_id)

    if user is None:
        raise UnauthenticatedError()

    return user


CurrentUser = Annotated[DBUser, Depends(get_current_user)]


# Per-request services ----------------------------------------------------------

def get_auth_service(storage: StorageDep) -> AuthService:
    return AuthService(storage)


def get_profile_service(storage: StorageDep) -> ProfileService:
    return ProfileService(storage)


def get_membership_service(storage: StorageDep, hubspot: HubSpotDep, settings: SettingsDep) -> MembershipService:
    return MembershipService(storage, hubspot, settings.membership)


def get_event_sync_service(storage: StorageDep, eventbrite: EventbriteDep) -> EventSyncService:
    return EventSyncService(storage, eventbrite)


def get_registration_service(storage: StorageDep, settings: SettingsDep) -> RegistrationService:
    return RegistrationService(storage, settings.registration)


def get_reconciliation_service(
    storage: StorageDep,
    hubspot: HubSpotDep,
    eventbrite: EventbriteDep,
    settings: SettingsDep,
    event_sync: Annotated[EventSyncService, Depends(get_event_sync_service)],
) -> ReconciliationService:
    return ReconciliationService(
        identity=IdentityService(storage, hubspot),
        hubspot=hubspot,
        eventbrite=eventbrite,
        event_sync=event_sync,
        config=settings.hubspot,
        max_concurrency=settings.eventbrite.max_concurrency,
    )
