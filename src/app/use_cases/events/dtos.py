"""
Event Security Use Case DTOs (Data Transfer Objects)

Response classes for the registration guard and event access tokens.
"""

from typing import List, Optional

from pydantic import BaseModel

from src.app.repositories.event_repository import RegistrationIPGroup
from src.app.services.risk_scorer import RiskAssessment
from src.app.use_cases.fraud.dtos import CheckFailure
from src.domain.entities import RiskLevel


class RateLimitDecision(BaseModel):
    allowed: bool
    registration_count: int
    message: Optional[str] = None


class RegistrationRiskAssessment(BaseModel):
    risk_level: RiskLevel
    risk_score: float
    requires_additional_verification: bool
    assessment: RiskAssessment


class SuspiciousRegistrationReport(BaseModel):
    suspicious_registrations: List[RegistrationIPGroup]
    potential_fraud: bool


class EventSecurityDecision(BaseModel):
    """
    Final allow/deny for a registration.

    allowed depends only on the rate limit and the suspicious
    registration scan; risk only sets requires_additional_verification.
    """

    event_id: str
    user_id: str
    allowed: bool
    requires_additional_verification: bool
    rate_limit: Optional[RateLimitDecision]
    risk_assessment: Optional[RegistrationRiskAssessment]
    suspicious_registrations: Optional[SuspiciousRegistrationReport]
    failures: List[CheckFailure]


class VerifyAccessTokenResponse(BaseModel):
    valid: bool
