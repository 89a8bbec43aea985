from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.db.models.membership import Membership
from app.schemas.base import CamelSchema


class MembershipCreate(CamelSchema):
    user_id: int
    membership_id: str
    type: str
    status: str
    join_date: datetime
    expiry_date: datetime
    hubspot_deal_id: str | None = None


class MembershipUpdate(CamelSchema):
    type: str | None = None
    status: str | None = None
    expiry_date: datetime | None = None
    hubspot_deal_id: str | None = None


class MembershipView(Membership):
    """Membership with fields derived at read time, never stored."""
    days_until_expiry: int | None = None
    renewal_needed: bool | None = None


class MembershipResponse(CamelSchema):
    membership: MembershipView


class CrmContactView(BaseModel):
    """Contact projection; CRM property names are passed through as-is."""
    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    membership_type: str | None = None
    membership_paid_through__c: str | None = None
    current_term_start_date__c: str | None = None
    member_status: str | None = None
    activated_date__c: str | None = None
    days_until_expiry: int | None = Field(None, alias="daysUntilExpiry")
    renewal_needed: bool | None = Field(None, alias="renewalNeeded")


class CrmCompanyView(BaseModel):
    name: str | None = None
    membership_type: str | None = None


class DashboardDataResponse(BaseModel):
    contact: CrmContactView
    company: CrmCompanyView | None = None
