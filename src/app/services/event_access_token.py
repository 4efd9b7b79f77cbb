"""
Event Access Token Issuer

Short-lived grants binding (event_id, user_id, issued_at) with a keyed
SHA-256 HMAC. The issuance time travels inside the token so verification
recomputes the digest from the same tuple that was signed.

Token format: "<issued_at_ms>.<hex digest>"
"""

import hashlib
import hmac
from datetime import UTC, datetime, timedelta
from typing import Optional, Tuple
from uuid import UUID

from pydantic import BaseModel

from config import ApplicationConfig
from src.domain.base import utcnow


class EventAccessToken(BaseModel):
    event_id: str
    user_id: str
    issued_at: datetime
    expires_at: datetime
    token: str


def to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return int(moment.timestamp() * 1000)


def from_millis(millis: int) -> datetime:
    return datetime.fromtimestamp(millis / 1000, UTC).replace(tzinfo=None)


class EventAccessTokenIssuer:
    def __init__(self, secret: Optional[str] = None, ttl: Optional[timedelta] = None):
        self.secret = (secret or ApplicationConfig.EVENT_TOKEN_SECRET).encode()
        self.ttl = ttl or timedelta(hours=ApplicationConfig.EVENT_TOKEN_TTL_HOURS)

    def sign(self, event_id: UUID, user_id: UUID, issued_at_ms: int) -> str:
        message = f"{event_id}|{user_id}|{issued_at_ms}".encode()
        return hmac.new(self.secret, message, hashlib.sha256).hexdigest()

    def issue(
        self, event_id: UUID, user_id: UUID, now: Optional[datetime] = None
    ) -> EventAccessToken:
        issued_at_ms = to_millis(now or utcnow())
        issued_at = from_millis(issued_at_ms)
        digest = self.sign(event_id, user_id, issued_at_ms)
        return EventAccessToken(
            event_id=str(event_id),
            user_id=str(user_id),
            issued_at=issued_at,
            expires_at=issued_at + self.ttl,
            token=f"{issued_at_ms}.{digest}",
        )

    @staticmethod
    def parse(token: str) -> Optional[Tuple[int, str]]:
        """Split a token into (issued_at_ms, digest); None if malformed."""
        issued_part, sep, digest = token.partition(".")
        if not sep or not digest or not issued_part.isdigit():
            return None
        return int(issued_part), digest

    def verify(
        self,
        token: str,
        event_id: UUID,
        user_id: UUID,
        now: Optional[datetime] = None,
    ) -> bool:
        parsed = self.parse(token)
        if parsed is None:
            return False
        issued_at_ms, digest = parsed

        expected = self.sign(event_id, user_id, issued_at_ms)
        if not hmac.compare_digest(expected, digest):
            return False

        expires_at = from_millis(issued_at_ms) + self.ttl
        return (now or utcnow()) <= expires_at
