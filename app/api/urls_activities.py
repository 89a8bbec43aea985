from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.deps import CurrentUser, get_profile_service
from app.schemas.activities import ActivityListResponse
from app.services.profile_service import ProfileService

activities_router = APIRouter()


@activities_router.get("/activities", response_model=ActivityListResponse)
async def list_activities(
        current_user: CurrentUser,
        profile_service: Annotated[ProfileService, Depends(get_profile_service)],
        limit: int = Query(10, ge=1, le=100, description="Number of most recent entries"),
):
    return {"activities": profile_service.recent_activities(current_user.id, limit)}
