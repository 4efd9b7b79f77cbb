"""
Audit Use Case DTOs (Data Transfer Objects)

Command and Response classes for the audit log domain.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.app.repositories.audit_event_repository import ActionStats, FailureBurst
from src.domain.entities import ActionKind, AuditEvent


# ============================================================================
# Command DTOs
# ============================================================================


class RecordAuditEventCommand(BaseModel):
    """Append one audit event"""

    actor_id: Optional[UUID] = None
    actor_name: Optional[str] = None
    actor_role: Optional[str] = None
    action: ActionKind
    details: Dict[str, Any] = Field(default_factory=dict)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    success: bool = True


# ============================================================================
# Response DTOs
# ============================================================================


class AuditEventView(BaseModel):
    """Audit event as returned to callers"""

    id: int
    actor_id: Optional[str]
    actor_name: Optional[str]
    actor_role: Optional[str]
    action: str
    details: Dict[str, Any]
    ip_address: Optional[str]
    user_agent: Optional[str]
    success: bool
    timestamp: str

    @classmethod
    def from_entity(cls, event: AuditEvent) -> "AuditEventView":
        return cls(
            id=event.id,
            actor_id=str(event.actor_id) if event.actor_id else None,
            actor_name=event.actor_name,
            actor_role=event.actor_role,
            action=event.action,
            details=event.details or {},
            ip_address=event.ip_address,
            user_agent=event.user_agent,
            success=event.success,
            timestamp=event.created_at.isoformat() + "Z",
        )


class RecordAuditEventResponse(BaseModel):
    id: int


class AuditEventsPage(BaseModel):
    events: List[AuditEventView]
    next_cursor: Optional[str]


class SecurityReport(BaseModel):
    timeframe_days: int
    generated_at: datetime
    action_breakdown: List[ActionStats]


class FailureBurstReport(BaseModel):
    potential_security_threats: List[FailureBurst]
    detected_at: datetime
