"""
Event Entity

A scheduled event that accounts register for.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import EventStatus


class Event(SQLModel, table=True):
    """
    Event entity - the resource directory consumed by the registration guard.

    Business Rules:
    - capacity is between 1 and 10,000 when set
    - participants are stored in event_participants, one row per registration
    """

    __tablename__ = "events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=100)
    organizer_id: UUID = Field(foreign_key="users.id", index=True)
    capacity: Optional[int] = Field(default=None, ge=1, le=10000)
    status: EventStatus = Field(default=EventStatus.draft)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_event_status", "status"),)
