from datetime import datetime
from typing import Optional

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from app.core.config import MembershipConfig
from app.core.exceptions import ForbiddenError, NotFoundError, UpstreamError
from app.db.models.users import User
from app.db.storage import MemStorage
from app.schemas.membership import (
    CrmCompanyView,
    CrmContactView,
    DashboardDataResponse,
    MembershipView,
)
from app.services.hubspot_client import HubSpotClient
from app.utils.dates import renewal_status

CONTACT_PROPERTIES = [
    "email",
    "firstname",
    "lastname",
    "membership_type",
    "membership_paid_through__c",
    "current_term_start_date__c",
    "member_status",
    "activated_date__c",
    "associatedcompanyid",
]
COMPANY_PROPERTIES = ["name", "membership_type"]


class MembershipService:
    """
    Read-only membership snapshots.

    The local membership and the CRM contact use different renewal windows
    (``renewal_threshold_days`` and ``crm_renewal_threshold_days``).
    """

    def __init__(self, storage: MemStorage, hubspot: HubSpotClient, config: MembershipConfig):
        self.storage = storage
        self.hubspot = hubspot
        self.config = config

    def get_membership_view(self, user_id: int, now: Optional[datetime] = None) -> MembershipView:
        membership = self.storage.get_membership_by_user_id(user_id)
        if membership is None:
            raise NotFoundError("Membership not found")

        days, renewal_needed = renewal_status(
            membership.expiry_date, self.config.renewal_threshold_days, now
        )
        return MembershipView(
            **membership.model_dump(),
            days_until_expiry=days,
            renewal_needed=renewal_needed,
        )

    async def get_dashboard_data(self, user: User, now: Optional[datetime] = None) -> DashboardDataResponse:
        token = user.hubspot_access_token or self.hubspot.config.access_token
        if not user.email or not token:
            raise ForbiddenError("User data or HubSpot token missing.")

        search = await self.hubspot.search_contacts_by_email(user.email, CONTACT_PROPERTIES, token=token)
        if not search.results:
            raise NotFoundError("HubSpot contact not found for this email.")

        contact = search.results[0]
        company = None
        company_id = contact.prop("associatedcompanyid")
        if company_id:
            try:
                company_obj = await self.hubspot.get_company(company_id, COMPANY_PROPERTIES, token=token)
                company = CrmCompanyView(
                    name=company_obj.prop("name"),
                    membership_type=company_obj.prop("membership_type"),
                )
            except (UpstreamError, PydanticValidationError) as e:
                logger.warning(f"Failed to fetch HubSpot company {company_id}: {e}")

        paid_through = contact.prop("membership_paid_through__c")
        days, renewal_needed = renewal_status(paid_through, self.config.crm_renewal_threshold_days, now)

        return DashboardDataResponse(
            contact=CrmContactView(
                email=contact.prop("email"),
                first_name=contact.prop("firstname"),
                last_name=contact.prop("lastname"),
                membership_type=contact.prop("membership_type"),
                membership_paid_through__c=paid_through,
                current_term_start_date__c=contact.prop("current_term_start_date__c"),
                member_status=contact.prop("member_status"),
                activated_date__c=contact.prop("activated_date__c"),
                days_until_expiry=days,
                renewal_needed=renewal_needed,
            ),
            company=company,
        )
