from pydantic import BaseModel
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent.parent


class RunConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000

class ApiPrefixConfig(BaseModel):
    prefix: str = "/api"

class LogConfig(BaseModel):
    level: str = "INFO"
    to_file: bool = True


class SessionConfig(BaseModel):
    secret_key: str = "cla-dev-secret-key"
    algorithm: str = "HS256"
    cookie_name: str = "cla_session"
    max_age_hours: int = 24 # absolute lifetime, not refreshed on activity
    secure_cookie: bool = False


class HubSpotConfig(BaseModel):
    access_token: str | None = None
    base_url: str = "https://api.hubapi.com"
    registration_object_type: str = "2-43504117"
    registration_association_type_id: str = "1-95"
    attendee_property: str = "attendee_number"
    timeout_sec: float = 10.0


class EventbriteConfig(BaseModel):
    private_token: str | None = None
    organization_id: str | None = None
    base_url: str = "https://www.eventbriteapi.com/v3"
    timeout_sec: float = 10.0
    max_pages: int = 10
    max_concurrency: int = 4 # parallel attendee/event lookups per request
    sync_interval_sec: int = 0 # 0 disables the background catalog sync

    @property
    def configured(self) -> bool:
        return bool(self.private_token and self.organization_id)


class MembershipConfig(BaseModel):
    renewal_threshold_days: int = 60
    crm_renewal_threshold_days: int = 30


class RegistrationConfig(BaseModel):
    ticket_prefix: str = "CLA"


class DemoConfig(BaseModel):
    seed: bool = True
    password: str = "changeme"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter='__',
        env_prefix="APP_CONFIG__",
        extra="ignore",
    )
    run: RunConfig = RunConfig()
    api: ApiPrefixConfig = ApiPrefixConfig()
    log: LogConfig = LogConfig()
    session: SessionConfig = SessionConfig()
    hubspot: HubSpotConfig = HubSpotConfig()
    eventbrite: EventbriteConfig = EventbriteConfig()
    membership: MembershipConfig = MembershipConfig()
    registration: RegistrationConfig = RegistrationConfig()
    demo: DemoConfig = DemoConfig()

settings = Settings()
