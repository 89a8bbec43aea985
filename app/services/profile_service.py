from typing import List

from loguru import logger

from app.core.exceptions import NotFoundError
from app.db.models.activity import Activity
from app.db.models.users import User
from app.db.storage import MemStorage
from app.schemas.activities import ActivityCreate
from app.schemas.users import ProfileResponse, UserUpdate


class ProfileService:

    def __init__(self, storage: MemStorage):
        self.storage = storage

    def get_profile(self, user_id: int) -> ProfileResponse:
        user = self.storage.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return ProfileResponse(user=user, membership=self.storage.get_membership_by_user_id(user_id))

    def update_profile(self, user_id: int, updates: UserUpdate) -> User:
        user = self.storage.update_user(user_id, updates)
        if user is None:
            raise NotFoundError("User not found")

        self.storage.create_activity(ActivityCreate(
            user_id=user_id,
            type="profile_update",
            description="Profile updated - Personal information changed",
        ))
        logger.info(f"Profile updated for user {user_id}: {sorted(updates.model_fields_set)}")
        return user

    def recent_activities(self, user_id: int, limit: int = 10) -> List[Activity]:
        return self.storage.get_activities_by_user_id(user_id, limit)
