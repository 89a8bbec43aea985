from datetime import datetime, timezone

import httpx
import pytest

from app.core.config import EventbriteConfig
from app.core.exceptions import NotFoundError, UpstreamError, UpstreamUnavailableError
from app.services.event_sync_service import EventSyncService
from app.services.eventbrite_client import EventbriteClient
from app.services.identity_service import IdentityService
from app.services.reconciliation_service import ReconciliationService
from tests.upstream import eventbrite_event

SEARCH_PATH = "/crm/v3/objects/contacts/search"
OBJECT_TYPE = "2-43504117"
ASSOCIATIONS_PATH = f"/crm/v4/objects/contacts/501/associations/{OBJECT_TYPE}"
BATCH_READ_PATH = f"/crm/v3/objects/{OBJECT_TYPE}/batch/read"


def association(object_id, *type_ids):
    return {
        "toObjectId": object_id,
        "associationTypes": [{"category": "USER_DEFINED", "typeId": type_id} for type_id in type_ids],
    }


def registration_record(object_id, attendee_number):
    properties = {"hs_object_id": str(object_id)}
    if attendee_number is not None:
        properties["attendee_number"] = attendee_number
    return {"id": str(object_id), "properties": properties}


@pytest.fixture
def identity(storage, hubspot):
    return IdentityService(storage, hubspot)


@pytest.fixture
def reconciliation(test_settings, identity, hubspot, eventbrite, storage):
    return ReconciliationService(
        identity=identity,
        hubspot=hubspot,
        eventbrite=eventbrite,
        event_sync=EventSyncService(storage, eventbrite),
        config=test_settings.hubspot,
        max_concurrency=test_settings.eventbrite.max_concurrency,
    )


@pytest.fixture
def linked_member(storage, member):
    return storage.update_user(member.id, {"hubspot_contact_id": "501"})


def stub_crm(hubspot_upstream, attendees):
    hubspot_upstream.add("GET", ASSOCIATIONS_PATH, {"results": [
        association(9000 + index, "1-95") for index in range(len(attendees))
    ]})
    hubspot_upstream.add("POST", BATCH_READ_PATH, {"results": [
        registration_record(9000 + index, attendee) for index, attendee in enumerate(attendees)
    ]})


# Identity resolution ------------------------------------------------------------

@pytest.mark.asyncio
async def test_cached_contact_id_makes_no_call(identity, linked_member, hubspot_upstream):
    assert await identity.resolve_contact_id(linked_member) == "501"
    assert hubspot_upstream.calls == []


@pytest.mark.asyncio
async def test_contact_id_is_found_and_cached(identity, storage, member, hubspot_upstream):
    hubspot_upstream.add("POST", SEARCH_PATH, {"total": 1, "results": [{"id": 501, "properties": {}}]})

    assert await identity.resolve_contact_id(member) == "501"
    assert storage.get_user(member.id).hubspot_contact_id == "501"

    search = hubspot_upstream.calls[0]
    assert search.headers["Authorization"] == "Bearer hs-test-token"
    assert b'"value":"a@b.com"' in search.content.replace(b" ", b"")
    assert b'"limit":1' in search.content.replace(b" ", b"")


@pytest.mark.asyncio
async def test_unknown_email_is_not_found(identity, storage, member, hubspot_upstream):
    hubspot_upstream.add("POST", SEARCH_PATH, {"total": 0, "results": []})

    with pytest.raises(NotFoundError):
        await identity.resolve_contact_id(member)

    assert storage.get_user(member.id).hubspot_contact_id is None


@pytest.mark.asyncio
async def test_search_failure_carries_upstream_details(identity, member, hubspot_upstream):
    hubspot_upstream.add("POST", SEARCH_PATH, {"message": "expired token"}, status_code=401)

    with pytest.raises(UpstreamError) as exc_info:
        await identity.resolve_contact_id(member)

    assert exc_info.value.upstream_status == 401
    assert "expired token" in exc_info.value.body


@pytest.mark.asyncio
async def test_search_with_non_json_body_is_an_upstream_error(identity, member, hubspot_upstream):
    hubspot_upstream.add_handler("POST", SEARCH_PATH, lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(UpstreamError) as exc_info:
        await identity.resolve_contact_id(member)

    assert exc_info.value.message == "Failed to search HubSpot contact: invalid JSON"


# Registration reconciliation ----------------------------------------------------

@pytest.mark.asyncio
async def test_one_failing_attendee_is_skipped(reconciliation, linked_member, hubspot_upstream, eventbrite_upstream):
    stub_crm(hubspot_upstream, ["A1", "A2", "A3"])
    eventbrite_upstream.add("GET", "/v3/attendees/A1/", {"id": "A1", "event_id": "E-late"})
    eventbrite_upstream.add("GET", "/v3/attendees/A2/", {"error": "NOT_FOUND"}, status_code=404)
    eventbrite_upstream.add("GET", "/v3/attendees/A3/", {"id": "A3", "event_id": "E-early"})
    eventbrite_upstream.add("GET", "/v3/events/E-late/", eventbrite_event("E-late", "2030-09-01T10:00:00Z"))
    eventbrite_upstream.add("GET", "/v3/events/E-early/", eventbrite_event("E-early", "2030-02-01T10:00:00Z"))

    events = await reconciliation.registered_events(linked_member)

    assert [event.eventbrite_id for event in events] == ["E-early", "E-late"]


@pytest.mark.asyncio
async def test_group_tickets_fetch_each_event_once(
        reconciliation, storage, linked_member, hubspot_upstream, eventbrite_upstream):
    stub_crm(hubspot_upstream, ["A1", "A2"])
    eventbrite_upstream.add("GET", "/v3/attendees/A1/", {"id": "A1", "event_id": "E1"})
    eventbrite_upstream.add("GET", "/v3/attendees/A2/", {"id": "A2", "event_id": "E1"})
    eventbrite_upstream.add("GET", "/v3/events/E1/", eventbrite_event("E1", "2030-02-01T10:00:00Z", name="Expo"))

    events = await reconciliation.registered_events(linked_member)

    assert [event.title for event in events] == ["Expo"]
    assert eventbrite_upstream.paths().count("/v3/events/E1/") == 1
    assert storage.get_event_by_eventbrite_id("E1").id == events[0].id


@pytest.mark.asyncio
async def test_attendee_with_non_json_body_is_skipped(
        reconciliation, linked_member, hubspot_upstream, eventbrite_upstream):
    stub_crm(hubspot_upstream, ["A1", "A2"])
    eventbrite_upstream.add("GET", "/v3/attendees/A1/", {"id": "A1", "event_id": "E1"})
    eventbrite_upstream.add_handler("GET", "/v3/attendees/A2/", lambda request: httpx.Response(200, text="oops"))
    eventbrite_upstream.add("GET", "/v3/events/E1/", eventbrite_event("E1", "2030-02-01T10:00:00Z"))

    events = await reconciliation.registered_events(linked_member)

    assert [event.eventbrite_id for event in events] == ["E1"]


@pytest.mark.asyncio
async def test_events_without_utc_offset_sort_with_aware_ones(
        reconciliation, linked_member, hubspot_upstream, eventbrite_upstream):
    stub_crm(hubspot_upstream, ["A1", "A2"])
    eventbrite_upstream.add("GET", "/v3/attendees/A1/", {"id": "A1", "event_id": "E1"})
    eventbrite_upstream.add("GET", "/v3/attendees/A2/", {"id": "A2", "event_id": "E2"})
    eventbrite_upstream.add("GET", "/v3/events/E1/", eventbrite_event("E1", "2030-02-01T10:00:00Z"))
    eventbrite_upstream.add("GET", "/v3/events/E2/", eventbrite_event("E2", "2030-01-01T10:00:00"))

    events = await reconciliation.registered_events(linked_member)

    assert [event.eventbrite_id for event in events] == ["E2", "E1"]
    assert events[0].start_date == datetime(2030, 1, 1, 10, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_failing_event_is_skipped(reconciliation, linked_member, hubspot_upstream, eventbrite_upstream):
    stub_crm(hubspot_upstream, ["A1", "A2"])
    eventbrite_upstream.add("GET", "/v3/attendees/A1/", {"id": "A1", "event_id": "E1"})
    eventbrite_upstream.add("GET", "/v3/attendees/A2/", {"id": "A2", "event_id": "E2"})
    eventbrite_upstream.add("GET", "/v3/events/E1/", {"error": "INTERNAL"}, status_code=500)
    eventbrite_upstream.add("GET", "/v3/events/E2/", eventbrite_event("E2", "2030-02-01T10:00:00Z"))

    events = await reconciliation.registered_events(linked_member)

    assert [event.eventbrite_id for event in events] == ["E2"]


@pytest.mark.asyncio
async def test_only_registration_association_type_counts(
        reconciliation, linked_member, hubspot_upstream, eventbrite_upstream):
    hubspot_upstream.add("GET", ASSOCIATIONS_PATH, {"results": [
        association(9001, "1-95"),
        association(9002, "7"),
    ]})
    hubspot_upstream.add("POST", BATCH_READ_PATH, {"results": [registration_record(9001, None)]})

    assert await reconciliation.registered_events(linked_member) == []

    batch_read = hubspot_upstream.calls[-1]
    assert b"9001" in batch_read.content
    assert b"9002" not in batch_read.content
    assert eventbrite_upstream.calls == []


@pytest.mark.asyncio
async def test_no_associations_is_an_empty_list(reconciliation, linked_member, hubspot_upstream):
    hubspot_upstream.add("GET", ASSOCIATIONS_PATH, {"results": []})

    assert await reconciliation.registered_events(linked_member) == []
    assert hubspot_upstream.paths() == [ASSOCIATIONS_PATH]


@pytest.mark.asyncio
async def test_association_failure_is_fatal(reconciliation, linked_member, hubspot_upstream):
    hubspot_upstream.add("GET", ASSOCIATIONS_PATH, {"message": "boom"}, status_code=500)

    with pytest.raises(UpstreamError):
        await reconciliation.registered_events(linked_member)


@pytest.mark.asyncio
async def test_missing_contact_stops_before_other_calls(
        reconciliation, member, hubspot_upstream, eventbrite_upstream):
    hubspot_upstream.add("POST", SEARCH_PATH, {"total": 0, "results": []})

    with pytest.raises(NotFoundError):
        await reconciliation.registered_events(member)

    assert hubspot_upstream.paths() == [SEARCH_PATH]
    assert eventbrite_upstream.calls == []


@pytest.mark.asyncio
async def test_requires_ticketing_token(test_settings, identity, hubspot, storage, linked_member, eventbrite_upstream):
    eventbrite = EventbriteClient(EventbriteConfig(), transport=eventbrite_upstream.transport)
    service = ReconciliationService(identity, hubspot, eventbrite, EventSyncService(storage, eventbrite),
                                    test_settings.hubspot)

    with pytest.raises(UpstreamUnavailableError):
        await service.registered_events(linked_member)
