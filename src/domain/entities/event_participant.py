"""
EventParticipant Entity

Registration of a user for an event.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel, UniqueConstraint

from src.domain.base import utcnow


class EventParticipant(SQLModel, table=True):
    """
    EventParticipant entity - links User to Event.

    Business Rules:
    - (event_id, user_id) must be unique
    - registered_at is what the registration rate limit counts against
    """

    __tablename__ = "event_participants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="events.id", nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    registered_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_participant"),
        Index("idx_participant_user_registered", "user_id", "registered_at"),
    )
