import httpx
import pytest
import pytest_asyncio

from app.core.config import (
    DemoConfig,
    EventbriteConfig,
    HubSpotConfig,
    LogConfig,
    Settings,
)
from app.db.storage import MemStorage
from app.schemas.users import UserCreate
from app.services.auth_service import get_password_hash
from app.services.eventbrite_client import EventbriteClient
from app.services.hubspot_client import HubSpotClient
from main import create_app
from tests.upstream import FakeUpstream

PASSWORD = "s3cret-pass"
MEMBER_EMAIL = "a@b.com"


@pytest.fixture(scope="session")
def password_hash() -> str:
    return get_password_hash(PASSWORD, rounds=4)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        hubspot=HubSpotConfig(access_token="hs-test-token"),
        eventbrite=EventbriteConfig(private_token="eb-test-token", organization_id="org-1", max_concurrency=2),
        demo=DemoConfig(seed=False),
        log=LogConfig(to_file=False),
    )


@pytest.fixture
def storage() -> MemStorage:
    return MemStorage()


@pytest.fixture
def member(storage, password_hash):
    return storage.create_user(UserCreate(
        email=MEMBER_EMAIL,
        first_name="Ada",
        last_name="Byrne",
        hashed_password=password_hash,
    ))


@pytest.fixture
def hubspot_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def eventbrite_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def hubspot(test_settings, hubspot_upstream) -> HubSpotClient:
    return HubSpotClient(test_settings.hubspot, transport=hubspot_upstream.transport)


@pytest.fixture
def eventbrite(test_settings, eventbrite_upstream) -> EventbriteClient:
    return EventbriteClient(test_settings.eventbrite, transport=eventbrite_upstream.transport)


@pytest.fixture
def app(test_settings, storage, hubspot_upstream, eventbrite_upstream):
    return create_app(
        test_settings,
        storage=storage,
        hubspot_transport=hubspot_upstream.transport,
        eventbrite_transport=eventbrite_upstream.transport,
    )


@pytest_asyncio.fixture
async def client(app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://portal.test") as client:
        yield client


@pytest_asyncio.fixture
async def logged_in(client, member):
    response = await client.post("/api/auth/login", json={"email": MEMBER_EMAIL, "password": PASSWORD})
    assert response.status_code == 200
    return client
