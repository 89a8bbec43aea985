from typing import Any, Dict, List, Optional

import httpx
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from app.core.config import EventbriteConfig
from app.core.exceptions import UpstreamError, UpstreamUnavailableError
from app.schemas.eventbrite import Attendee, EventbriteEvent, EventbriteEventPage


class EventbriteClient:
    """Thin async client for the ticketing REST API (private token auth)."""

    def __init__(self, config: EventbriteConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    @property
    def configured(self) -> bool:
        return self.config.configured

    async def _get(self, path: str, *, params: Optional[Dict[str, Any]] = None, action: str) -> Any:
        if not self.config.private_token:
            raise UpstreamUnavailableError("Eventbrite API not configured.")

        headers = {
            "Authorization": f"Bearer {self.config.private_token}",
            "Content-Type": "application/json",
        }
        url = f"{self.config.base_url.rstrip('/')}{path}"

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout_sec, transport=self._transport) as client:
                response = await client.get(url, headers=headers, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Eventbrite {action} request failed: {e}")
            raise UpstreamError(f"Failed to {action}", body=str(e)) from e

        if response.is_error:
            logger.error(f"Eventbrite {action} API error: {response.status_code} {response.text}")
            raise UpstreamError(
                f"Failed to {action}: {response.reason_phrase}",
                upstream_status=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Eventbrite {action} returned a non-JSON body: {response.text[:200]}")
            raise UpstreamError(
                f"Failed to {action}: invalid JSON",
                upstream_status=response.status_code,
                body=response.text,
            ) from e

    async def list_organization_events(self, expand: Optional[List[str]] = None) -> List[EventbriteEvent]:
        """
        Live events of the organization, ascending by start.

        Follows the continuation token while more pages are announced, up to
        ``max_pages``. Events that do not match the expected shape are skipped.
        """
        if not self.configured:
            raise UpstreamUnavailableError("Eventbrite API not configured.")

        params: Dict[str, Any] = {"status": "live", "order_by": "start_asc"}
        if expand:
            params["expand"] = ",".join(expand)

        events: List[EventbriteEvent] = []
        for _ in range(self.config.max_pages):
            data = await self._get(
                f"/organizations/{self.config.organization_id}/events/",
                params=params, action="fetch events from Eventbrite",
            )
            page = EventbriteEventPage.model_validate(data)

            for raw_event in page.events:
                try:
                    events.append(EventbriteEvent.model_validate(raw_event))
                except PydanticValidationError as e:
                    logger.warning(f"Skipping malformed Eventbrite event {raw_event.get('id')}: {e.error_count()} errors")

            if not (page.pagination and page.pagination.has_more_items and page.pagination.continuation):
                break
            params["continuation"] = page.pagination.continuation
        else:
            logger.warning(f"Eventbrite event listing truncated after {self.config.max_pages} pages")

        return events

    async def get_attendee(self, attendee_id: str) -> Attendee:
        data = await self._get(f"/attendees/{attendee_id}/", action=f"fetch Eventbrite attendee {attendee_id}")
        return Attendee.model_validate(data)

    async def get_event(self, event_id: str, expand: Optional[List[str]] = None) -> EventbriteEvent:
        params = {"expand": ",".join(expand)} if expand else None
        data = await self._get(f"/events/{event_id}/", params=params, action=f"fetch Eventbrite event {event_id}")
        return EventbriteEvent.model_validate(data)
