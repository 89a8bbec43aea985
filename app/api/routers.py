from fastapi import APIRouter

from app.api.urls_activities import activities_router
from app.api.urls_auth import auth_router
from app.api.urls_eventbrite import eventbrite_router
from app.api.urls_events import events_router
from app.api.urls_membership import membership_router
from app.api.urls_user import user_router

main_router = APIRouter()

# Register API routers ---------------------------------------
main_router.include_router(auth_router)
main_router.include_router(user_router)
main_router.include_router(membership_router)
main_router.include_router(events_router)
main_router.include_router(eventbrite_router)
main_router.include_router(activities_router)
