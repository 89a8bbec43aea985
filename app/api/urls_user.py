from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import CurrentUser, get_profile_service
from app.schemas.users import ProfileResponse, UserResponse, UserUpdate
from app.services.profile_service import ProfileService

user_router = APIRouter(prefix="/user")


@user_router.get("/profile", response_model=ProfileResponse)
async def read_profile(
        current_user: CurrentUser,
        profile_service: Annotated[ProfileService, Depends(get_profile_service)],
):
    return profile_service.get_profile(current_user.id)


@user_router.patch("/profile", response_model=UserResponse)
async def update_profile(
        updates: UserUpdate,
        current_user: CurrentUser,
        profile_service: Annotated[ProfileService, Depends(get_profile_service)],
):
    user = profile_service.update_profile(current_user.id, updates)
    return {"user": user}
