"""
Fraud Use Cases

Per-user, per-IP and population fraud detection.
"""

from .detect_anomalies_use_case import DetectAnomaliesUseCase
from .detect_ip_based_fraud_use_case import DetectIPBasedFraudUseCase
from .detect_suspicious_user_activity_use_case import DetectSuspiciousUserActivityUseCase
from .dtos import (
    AnomalyReport,
    ComprehensiveFraudReport,
    IPFraudReport,
    SuspiciousActivityReport,
)
from .run_comprehensive_fraud_check_use_case import RunComprehensiveFraudCheckUseCase

__all__ = [
    "DetectAnomaliesUseCase",
    "DetectIPBasedFraudUseCase",
    "DetectSuspiciousUserActivityUseCase",
    "RunComprehensiveFraudCheckUseCase",
    "AnomalyReport",
    "ComprehensiveFraudReport",
    "IPFraudReport",
    "SuspiciousActivityReport",
]
