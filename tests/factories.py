"""Entity builders shared by unit and integration tests."""

from datetime import timedelta
from uuid import uuid4

from src.api.utils.jwt import generate_jwt
from src.domain.base import utcnow
from src.domain.entities import AuditEvent, Event, User


def make_user(age_days: float = 365, **kwargs) -> User:
    return User(
        id=kwargs.pop("id", uuid4()),
        username=kwargs.pop("username", f"user-{uuid4().hex[:8]}"),
        email=kwargs.pop("email", f"{uuid4().hex[:8]}@example.com"),
        created_at=utcnow() - timedelta(days=age_days),
        **kwargs,
    )


def make_event(capacity=100, **kwargs) -> Event:
    return Event(
        id=kwargs.pop("id", uuid4()),
        title=kwargs.pop("title", "Launch party"),
        organizer_id=kwargs.pop("organizer_id", uuid4()),
        capacity=capacity,
        **kwargs,
    )


def make_audit_event(action: str = "LOGIN_ATTEMPT", **kwargs) -> AuditEvent:
    return AuditEvent(
        id=kwargs.pop("id", None),
        action=action,
        created_at=kwargs.pop("created_at", utcnow()),
        **kwargs,
    )


def auth_headers(user_id, role: str = "user") -> dict:
    return {"Authorization": f"Bearer {generate_jwt(user_id, role)}"}
