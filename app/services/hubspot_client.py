from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from app.core.config import HubSpotConfig
from app.core.exceptions import UpstreamError, UpstreamUnavailableError
from app.schemas.hubspot import (
    AssociationListResponse,
    BatchReadResponse,
    ContactSearchResponse,
    CrmObject,
)


class HubSpotClient:
    """Thin async client for the CRM REST API (bearer token auth)."""

    def __init__(self, config: HubSpotConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.config.access_token)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        action: str,
    ) -> Any:
        token = token or self.config.access_token
        if not token:
            raise UpstreamUnavailableError("HubSpot access token not configured")

        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        url = f"{self.config.base_url.rstrip('/')}{path}"

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout_sec, transport=self._transport) as client:
                response = await client.request(method, url, headers=headers, params=params, json=json)
        except httpx.HTTPError as e:
            logger.error(f"HubSpot {action} request failed: {e}")
            raise UpstreamError(f"Failed to {action}", body=str(e)) from e

        if response.is_error:
            logger.error(f"HubSpot {action} API error: {response.status_code} {response.text}")
            raise UpstreamError(f"Failed to {action}", upstream_status=response.status_code, body=response.text)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"HubSpot {action} returned a non-JSON body: {response.text[:200]}")
            raise UpstreamError(
                f"Failed to {action}: invalid JSON",
                upstream_status=response.status_code,
                body=response.text,
            ) from e

    async def search_contacts_by_email(
        self,
        email: str,
        properties: List[str],
        *,
        token: Optional[str] = None,
    ) -> ContactSearchResponse:
        payload = {
            "filterGroups": [{
                "filters": [{"propertyName": "email", "operator": "EQ", "value": email}],
            }],
            "properties": properties,
            "limit": 1,
        }
        data = await self._request(
            "POST", "/crm/v3/objects/contacts/search",
            token=token, json=payload, action="search HubSpot contact",
        )
        return ContactSearchResponse.model_validate(data)

    async def get_company(
        self,
        company_id: str,
        properties: List[str],
        *,
        token: Optional[str] = None,
    ) -> CrmObject:
        data = await self._request(
            "GET", f"/crm/v3/objects/companies/{company_id}",
            token=token, params={"properties": ",".join(properties)},
            action="fetch HubSpot company",
        )
        return CrmObject.model_validate(data)

    async def list_contact_associations(self, contact_id: str, to_object_type: str) -> AssociationListResponse:
        data = await self._request(
            "GET", f"/crm/v4/objects/contacts/{contact_id}/associations/{to_object_type}",
            action="fetch associated registrations from HubSpot",
        )
        return AssociationListResponse.model_validate(data)

    async def batch_read(self, object_type: str, object_ids: List[str], properties: List[str]) -> BatchReadResponse:
        payload = {
            "inputs": [{"id": object_id} for object_id in object_ids],
            "properties": properties,
        }
        data = await self._request(
            "POST", f"/crm/v3/objects/{object_type}/batch/read",
            json=payload, action="batch read registration details from HubSpot",
        )
        return BatchReadResponse.model_validate(data)
