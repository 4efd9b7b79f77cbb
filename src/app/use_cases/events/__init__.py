"""
Event Security Use Cases

Registration guard and event access tokens.
"""

from .assess_registration_risk_use_case import AssessRegistrationRiskUseCase
from .check_registration_rate_limit_use_case import CheckRegistrationRateLimitUseCase
from .detect_suspicious_registrations_use_case import DetectSuspiciousRegistrationsUseCase
from .dtos import (
    EventSecurityDecision,
    RateLimitDecision,
    RegistrationRiskAssessment,
    SuspiciousRegistrationReport,
    VerifyAccessTokenResponse,
)
from .event_access_token_use_case import EventAccessTokenUseCase
from .perform_event_security_check_use_case import PerformEventSecurityCheckUseCase

__all__ = [
    "AssessRegistrationRiskUseCase",
    "CheckRegistrationRateLimitUseCase",
    "DetectSuspiciousRegistrationsUseCase",
    "EventAccessTokenUseCase",
    "PerformEventSecurityCheckUseCase",
    "EventSecurityDecision",
    "RateLimitDecision",
    "RegistrationRiskAssessment",
    "SuspiciousRegistrationReport",
    "VerifyAccessTokenResponse",
]
