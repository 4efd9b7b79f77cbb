"""
Monitoring Use Cases

System health, admin dashboards and threat intelligence.
"""

from .collect_threat_intelligence_use_case import CollectThreatIntelligenceUseCase
from .dtos import (
    ConnectionState,
    SecurityDashboard,
    SystemHealth,
    SystemReport,
    ThreatIntelligenceReport,
    ThreatOverview,
)
from .generate_system_report_use_case import GenerateSystemReportUseCase
from .get_security_dashboard_use_case import GetSecurityDashboardUseCase
from .get_system_health_use_case import GetSystemHealthUseCase
from .get_threat_overview_use_case import SECURITY_RECOMMENDATIONS, GetThreatOverviewUseCase

__all__ = [
    "CollectThreatIntelligenceUseCase",
    "GenerateSystemReportUseCase",
    "GetSecurityDashboardUseCase",
    "GetSystemHealthUseCase",
    "GetThreatOverviewUseCase",
    "SECURITY_RECOMMENDATIONS",
    "ConnectionState",
    "SecurityDashboard",
    "SystemHealth",
    "SystemReport",
    "ThreatIntelligenceReport",
    "ThreatOverview",
]
