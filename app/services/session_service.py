import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

from jose import jwt, JWTError
from loguru import logger

from app.core.config import SessionConfig
from app.core.exceptions import UnauthenticatedError


@dataclass
class SessionRecord:
    session_id: str
    user_id: int
    expires_at: datetime


class SessionService:
    """
    Server-side sessions with a fixed absolute lifetime.

    The cookie only carries a signed token naming the session id; the session
    itself lives here, so logging out invalidates the cookie immediately.
    """

    def __init__(self, config: SessionConfig):
        self.config = config
        self._sessions: Dict[str, SessionRecord] = {}

    @property
    def max_age(self) -> timedelta:
        return timedelta(hours=self.config.max_age_hours)

    def create_session(self, user_id: int, now: datetime | None = None) -> Tuple[str, SessionRecord]:
        now = now or datetime.now(timezone.utc)
        record = SessionRecord(
            session_id=secrets.token_urlsafe(32),
            user_id=user_id,
            expires_at=now + self.max_age,
        )
        self._purge_expired(now)
        self._sessions[record.session_id] = record

        to_encode = {
            "sid": record.session_id,
            "sub": str(user_id),
            "exp": record.expires_at,
        }
        token = jwt.encode(to_encode, self.config.secret_key, algorithm=self.config.algorithm)
        logger.debug(f"Session created for user {user_id}, expires at {record.expires_at.isoformat()}")
        return token, record

    def decode_token(self, token: str) -> str:
        try:
            payload = jwt.decode(token, self.config.secret_key, algorithms=[self.config.algorithm])
        except JWTError:
            raise UnauthenticatedError()

        session_id: str | None = payload.get("sid")
        if session_id is None:
            raise UnauthenticatedError()
        return session_id

    def resolve(self, token: Optional[str], now: datetime | None = None) -> SessionRecord:
        if not token:
            raise UnauthenticatedError()

        session_id = self.decode_token(token)
        record = self._sessions.get(session_id)
        if record is None:
            raise UnauthenticatedError()

        now = now or datetime.now(timezone.utc)
        if record.expires_at <= now:
            self._sessions.pop(session_id, None)
            raise UnauthenticatedError()
        return record

    def destroy(self, token: Optional[str]) -> None:
        if not token:
            return
        try:
            session_id = self.decode_token(token)
        except UnauthenticatedError:
            return
        if self._sessions.pop(session_id, None) is not None:
            logger.debug("Session destroyed")

    def _purge_expired(self, now: datetime) -> None:
        expired = [sid for sid, record in self._sessions.items() if record.expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
