"""
Event Platform Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    ActionKind,
    DIAGNOSTIC_ACTIONS,
    EventStatus,
    RiskLevel,
    UserRole,
)

# Export all entities
from .user import User
from .event import Event
from .event_participant import EventParticipant
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "ActionKind",
    "DIAGNOSTIC_ACTIONS",
    "EventStatus",
    "RiskLevel",
    "UserRole",
    # Entities
    "User",
    "Event",
    "EventParticipant",
    "AuditEvent",
]
