from datetime import datetime

from app.db.models.base import BaseRecord


class Activity(BaseRecord):
    user_id: int
    type: str
    description: str
    created_at: datetime
