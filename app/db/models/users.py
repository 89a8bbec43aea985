from datetime import datetime

from pydantic import Field

from app.db.models.base import BaseRecord


class User(BaseRecord):
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    hubspot_contact_id: str | None = None
    hubspot_user_id: str | None = None
    hubspot_access_token: str | None = Field(None, exclude=True)
    hubspot_refresh_token: str | None = Field(None, exclude=True)
    hashed_password: str | None = Field(None, exclude=True)
    company_name: str | None = None
    company_sector: str | None = None
    location_count: int | None = None
    created_at: datetime
