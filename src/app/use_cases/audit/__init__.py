"""
Audit Use Cases

All audit-log business logic.
"""

from .detect_failure_bursts_use_case import DetectFailureBurstsUseCase
from .dtos import (
    AuditEventsPage,
    AuditEventView,
    FailureBurstReport,
    RecordAuditEventCommand,
    RecordAuditEventResponse,
    SecurityReport,
)
from .generate_security_report_use_case import GenerateSecurityReportUseCase
from .get_audit_events_use_case import GetAuditEventsUseCase
from .record_audit_event_use_case import RecordAuditEventUseCase

__all__ = [
    "DetectFailureBurstsUseCase",
    "GenerateSecurityReportUseCase",
    "GetAuditEventsUseCase",
    "RecordAuditEventUseCase",
    "AuditEventsPage",
    "AuditEventView",
    "FailureBurstReport",
    "RecordAuditEventCommand",
    "RecordAuditEventResponse",
    "SecurityReport",
]
