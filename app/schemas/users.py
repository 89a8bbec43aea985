from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field, model_validator

from app.db.models.users import User
from app.db.models.membership import Membership
from app.schemas.base import CamelSchema


class LoginRequest(CamelSchema):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserCreate(CamelSchema):
    """Data for a new local user."""
    email: EmailStr
    first_name: str
    last_name: str
    phone: str | None = None
    hubspot_contact_id: str | None = None
    hubspot_user_id: str | None = None
    hubspot_access_token: str | None = None
    hubspot_refresh_token: str | None = None
    hashed_password: str | None = None
    company_name: str | None = None
    company_sector: str | None = None
    location_count: int | None = None
    created_at: datetime | None = None


class UserUpdate(CamelSchema):
    """Editable profile fields. Only the keys present in the body are applied."""
    model_config = ConfigDict(extra="forbid")

    email: EmailStr | None = None
    first_name: str | None = Field(None, min_length=1)
    last_name: str | None = Field(None, min_length=1)
    phone: str | None = None
    company_name: str | None = None
    company_sector: str | None = None
    location_count: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("email", "first_name", "last_name"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class UserResponse(CamelSchema):
    user: User


class ProfileResponse(CamelSchema):
    user: User
    membership: Membership | None = None
