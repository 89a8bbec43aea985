from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx

Handler = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """Routes (method, path) to canned responses and records every request."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Union[Handler, Tuple[int, Any]]] = {}
        self.calls: List[httpx.Request] = []

    def add(self, method: str, path: str, json: Any = None, status_code: int = 200):
        self.routes[(method, path)] = (status_code, json)

    def add_handler(self, method: str, path: str, handler: Handler):
        self.routes[(method, path)] = handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "no such route"})
        if callable(route):
            return route(request)
        status_code, body = route
        return httpx.Response(status_code, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.calls]


def eventbrite_event(
    event_id: str,
    start: str,
    end: Optional[str] = None,
    name: Optional[str] = "Member Meetup",
    description: Optional[str] = None,
    online: Optional[bool] = False,
    address: Optional[str] = None,
    venue_name: Optional[str] = None,
    price: Optional[int] = None,
    capacity: Optional[int] = None,
    **extra: Any,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": event_id,
        "name": {"text": name, "html": name} if name is not None else None,
        "description": {"text": description} if description is not None else None,
        "start": {"timezone": "UTC", "local": start.rstrip("Z"), "utc": start},
        "end": {"timezone": "UTC", "local": (end or start).rstrip("Z"), "utc": end or start},
        "online_event": online,
        "capacity": capacity,
        "status": "live",
        "url": f"https://www.eventbrite.com/e/{event_id}",
    }
    if address is not None or venue_name is not None:
        payload["venue"] = {"name": venue_name, "address": {"localized_address_display": address}}
    if price is not None:
        payload["ticket_availability"] = {"minimum_ticket_price": {"value": price, "currency": "USD"}}
    payload.update(extra)
    return payload

