from app.db.models.activity import Activity
from app.schemas.base import CamelSchema


class ActivityCreate(CamelSchema):
    user_id: int
    type: str
    description: str


class ActivityListResponse(CamelSchema):
    activities: list[Activity]
