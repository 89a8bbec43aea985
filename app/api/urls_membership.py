from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import CurrentUser, get_membership_service
from app.schemas.membership import DashboardDataResponse, MembershipResponse
from app.services.membership_service import MembershipService

membership_router = APIRouter()


@membership_router.get("/membership", response_model=MembershipResponse)
async def read_membership(
        current_user: CurrentUser,
        membership_service: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Local membership with daysUntilExpiry / renewalNeeded derived at read time."""
    return {"membership": membership_service.get_membership_view(current_user.id)}


@membership_router.get("/hubspot/dashboard-data", response_model=DashboardDataResponse)
async def read_dashboard_data(
        current_user: CurrentUser,
        membership_service: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Membership as recorded on the CRM contact and its company."""
    return await membership_service.get_dashboard_data(current_user)
