"""
Use Cases

Organized into domain folders:
- audit/: Audit log ingestion, listing and reports
- fraud/: Per-user, per-IP and population fraud detection
- events/: Registration guard and event access tokens
- monitoring/: System health, dashboards and threat intelligence

Import from subdirectories for better organization.
"""

from .audit import (
    GetAuditEventsUseCase,
    RecordAuditEventUseCase,
)
from .fraud import (
    DetectAnomaliesUseCase,
    DetectIPBasedFraudUseCase,
    DetectSuspiciousUserActivityUseCase,
    RunComprehensiveFraudCheckUseCase,
)
from .events import (
    EventAccessTokenUseCase,
    PerformEventSecurityCheckUseCase,
)
from .monitoring import (
    CollectThreatIntelligenceUseCase,
    GetSecurityDashboardUseCase,
    GetSystemHealthUseCase,
)

__all__ = [
    # Audit
    "GetAuditEventsUseCase",
    "RecordAuditEventUseCase",
    # Fraud
    "DetectAnomaliesUseCase",
    "DetectIPBasedFraudUseCase",
    "DetectSuspiciousUserActivityUseCase",
    "RunComprehensiveFraudCheckUseCase",
    # Events
    "EventAccessTokenUseCase",
    "PerformEventSecurityCheckUseCase",
    # Monitoring
    "CollectThreatIntelligenceUseCase",
    "GetSecurityDashboardUseCase",
    "GetSystemHealthUseCase",
]
