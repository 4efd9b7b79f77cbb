"""
Get Threat Overview Use Case

IP fraud and anomaly scans plus the standing security recommendations.
"""

from typing import List, Optional

from libs.result import Result, Return
from src.app.services.audit_log_service import AuditLogService
from src.app.services.concurrent_checks import gather_checks
from src.app.services.risk_scorer import RiskPolicy, load_risk_policy
from src.app.services.unit_of_work import UnitOfWorkFactory
from src.app.use_cases.fraud.detect_anomalies_use_case import DetectAnomaliesUseCase
from src.app.use_cases.fraud.detect_ip_based_fraud_use_case import DetectIPBasedFraudUseCase
from src.domain.base import utcnow
from .dtos import SecurityRecommendation, ThreatOverview

SECURITY_RECOMMENDATIONS: List[SecurityRecommendation] = [
    SecurityRecommendation(
        type="USER_AUTHENTICATION",
        priority="HIGH",
        description="Implement multi-factor authentication for all admin accounts",
        suggested_action="Enable 2FA for admin users",
    ),
    SecurityRecommendation(
        type="IP_SECURITY",
        priority="MEDIUM",
        description="Block suspicious IP addresses with multiple failed login attempts",
        suggested_action="Update IP blocking rules",
    ),
    SecurityRecommendation(
        type="EVENT_REGISTRATION",
        priority="LOW",
        description="Add additional verification for events with high-risk registration patterns",
        suggested_action="Implement advanced registration risk assessment",
    ),
]


class GetThreatOverviewUseCase:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        audit_log: AuditLogService,
        policy: Optional[RiskPolicy] = None,
        timeout: Optional[float] = None,
    ):
        self.uow_factory = uow_factory
        self.audit_log = audit_log
        self.policy = policy or load_risk_policy()
        self.timeout = timeout

    async def execute(self) -> Result[ThreatOverview]:
        results = await gather_checks(
            {
                "ip_fraud_detection": DetectIPBasedFraudUseCase(
                    self.uow_factory(), self.audit_log, self.policy
                ).execute(),
                "anomaly_detection": DetectAnomaliesUseCase(
                    self.uow_factory(), self.audit_log, self.policy
                ).execute(),
            },
            timeout=self.timeout,
        )

        for result in results.values():
            if result.is_err():
                return Return.err(result.error)

        return Return.ok(
            ThreatOverview(
                ip_fraud_detection=results["ip_fraud_detection"].value,
                anomaly_detection=results["anomaly_detection"].value,
                security_recommendations=list(SECURITY_RECOMMENDATIONS),
                timestamp=utcnow(),
            )
        )
