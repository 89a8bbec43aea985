from loguru import logger

from app.core.exceptions import NotFoundError
from app.db.models.users import User
from app.db.storage import MemStorage
from app.services.hubspot_client import HubSpotClient

CONTACT_LOOKUP_PROPERTIES = ["hs_object_id", "email"]


class IdentityService:
    """Maps a local user to their CRM contact id, caching it on the user."""

    def __init__(self, storage: MemStorage, hubspot: HubSpotClient):
        self.storage = storage
        self.hubspot = hubspot

    async def resolve_contact_id(self, user: User) -> str:
        if user.hubspot_contact_id:
            logger.debug(f"Using cached HubSpot contact {user.hubspot_contact_id} for user {user.id}")
            return user.hubspot_contact_id

        if not user.email:
            raise NotFoundError("User not found or email missing")

        result = await self.hubspot.search_contacts_by_email(user.email, CONTACT_LOOKUP_PROPERTIES)
        if result.total == 0 or not result.results:
            logger.warning(f"No HubSpot contact for user {user.id}")
            raise NotFoundError("HubSpot contact not found for user's email.")

        contact_id = result.results[0].id
        self.storage.update_user(user.id, {"hubspot_contact_id": contact_id})
        logger.info(f"Linked user {user.id} to HubSpot contact {contact_id}")
        return contact_id
