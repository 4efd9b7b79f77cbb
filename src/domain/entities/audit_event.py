"""
AuditEvent Entity

Append-only log of user and system actions.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of platform actions.

    Business Rules:
    - Immutable (never updated or deleted, no retention policy)
    - actor_* fields are empty for system-initiated events
    - action is an ActionKind value
    - Ordered by created_at, ties broken by id (insertion order)
    - details shape depends on action (see audit_details)
    """

    __tablename__ = "audit_events"

    id: Optional[int] = Field(default=None, primary_key=True)

    actor_id: Optional[UUID] = Field(default=None, index=True)
    actor_name: Optional[str] = Field(default=None, max_length=255)
    actor_role: Optional[str] = Field(default=None, max_length=20)

    action: str = Field(max_length=64)
    details: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    ip_address: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    success: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_actor_created", "actor_id", "created_at"),
        Index("idx_audit_action", "action"),
        Index("idx_audit_ip_success", "ip_address", "success"),
    )
