"""
Monitoring Use Case DTOs (Data Transfer Objects)

Response classes for health, dashboards and threat intelligence.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel

from src.app.services.system_probe import CpuStats, DiskUsage, HeapStats, MemoryStats
from src.app.services.threat_intelligence import CorrelatedThreat
from src.app.use_cases.audit.dtos import AuditEventView, SecurityReport
from src.app.use_cases.fraud.dtos import AnomalyReport, IPFraudReport


class ConnectionState(str, Enum):
    CONNECTED = "CONNECTED"
    DISCONNECTED = "DISCONNECTED"


class DatabaseStatus(BaseModel):
    connection_state: ConnectionState


class SystemHealth(BaseModel):
    timestamp: datetime
    cpu: CpuStats
    memory: MemoryStats
    heap: HeapStats
    database: DatabaseStatus
    disk: DiskUsage
    uptime_seconds: float


class SystemReport(BaseModel):
    system_health: SystemHealth
    security_report: SecurityReport
    performance_logs: List[AuditEventView]
    generated_at: datetime


class UserSecurityStats(BaseModel):
    total_users: int
    new_users: int
    suspicious_users: int


class EventSecurityStats(BaseModel):
    total_events: int
    new_events: int
    suspicious_events: int


class SecurityDashboard(BaseModel):
    system_health: SystemHealth
    fraud_detection: AnomalyReport
    security_report: SecurityReport
    user_stats: UserSecurityStats
    event_stats: EventSecurityStats
    timestamp: datetime


class SecurityRecommendation(BaseModel):
    type: str
    priority: str
    description: str
    suggested_action: str


class ThreatOverview(BaseModel):
    ip_fraud_detection: IPFraudReport
    anomaly_detection: AnomalyReport
    security_recommendations: List[SecurityRecommendation]
    timestamp: datetime


class PotentialTarget(BaseModel):
    user_id: str
    username: str


class ThreatAnalysis(BaseModel):
    total_threats: int
    high_severity_threats: List[CorrelatedThreat]
    threat_distribution: Dict[str, int]
    potential_targets: List[PotentialTarget]


class ThreatIntelligenceReport(BaseModel):
    threats: List[CorrelatedThreat]
    analysis: ThreatAnalysis
    collected_at: datetime
