"""
Fraud Detection Use Case DTOs (Data Transfer Objects)

Response classes for the fraud detector.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.app.repositories.audit_event_repository import IPFailureAggregate
from src.app.services.risk_scorer import RiskAssessment
from src.app.use_cases.audit.dtos import AuditEventView
from src.domain.entities import RiskLevel


class ContextualRisks(BaseModel):
    multiple_devices: bool
    geographical_inconsistency: bool


class SuspiciousActivityReport(BaseModel):
    """Response for per-user activity detection"""

    user_id: str
    risk_score: float
    risk_level: RiskLevel
    assessment: RiskAssessment
    suspicious_activities: List[AuditEventView]
    contextual_risks: ContextualRisks


class IPFraudReport(BaseModel):
    """Response for IP-based fraud detection"""

    suspicious_ips: List[IPFailureAggregate]
    timestamp: datetime


class PopulationBaseline(BaseModel):
    population_size: int
    avg_login_count: float
    avg_event_registrations: float


class AccountAnomaly(BaseModel):
    user_id: str
    username: str
    login_count: int
    event_count: int
    login_deviation: float
    event_deviation: float


class AnomalyReport(BaseModel):
    """Response for population anomaly detection"""

    anomalies: List[AccountAnomaly]
    baseline: PopulationBaseline
    timestamp: datetime


class CheckFailure(BaseModel):
    """A sub-check that could not produce a result"""

    check: str
    code: str
    message: str


class ComprehensiveFraudReport(BaseModel):
    """
    Three independent labels; no combined score is derived.
    A label is None when its check failed (see failures).
    """

    user_id: str
    user_activity_risk: Optional[RiskLevel]
    ip_fraud_risk: Optional[RiskLevel]
    anomaly_risk: Optional[RiskLevel]
    failures: List[CheckFailure]
