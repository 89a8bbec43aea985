from datetime import datetime

from app.db.models.base import BaseRecord


class Membership(BaseRecord):
    user_id: int
    membership_id: str
    type: str
    status: str
    join_date: datetime
    expiry_date: datetime
    hubspot_deal_id: str | None = None
