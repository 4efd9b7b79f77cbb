"""
Run Comprehensive Fraud Check Use Case

Runs the user, IP and anomaly detectors concurrently and folds their
outcomes into three independent risk labels.
"""

from typing import Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.audit_log_service import AuditLogService
from src.app.services.concurrent_checks import gather_checks
from src.app.services.risk_scorer import RiskPolicy, load_risk_policy
from src.app.services.unit_of_work import UnitOfWorkFactory
from src.domain.entities import ActionKind, RiskLevel
from .detect_anomalies_use_case import DetectAnomaliesUseCase
from .detect_ip_based_fraud_use_case import DetectIPBasedFraudUseCase
from .detect_suspicious_user_activity_use_case import DetectSuspiciousUserActivityUseCase
from .dtos import CheckFailure, ComprehensiveFraudReport


def label_value(level: Optional[RiskLevel]) -> Optional[str]:
    return level.value if level is not None else None


class RunComprehensiveFraudCheckUseCase:
    """
    Business Rules:
    - The three checks run concurrently, each in its own unit of work
    - A failed or timed-out check leaves its label None and is listed
      in failures; the other checks still report
    - ip_fraud_risk: HIGH if any IP is flagged, else LOW
    - anomaly_risk: MEDIUM if any anomaly is found, else LOW
    - An unknown user is still NotFound for the whole check
    """

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

    async def execute(self, user_id: UUID) -> Result[ComprehensiveFraudReport]:
        results = await gather_checks(
            {
                "user_activity": DetectSuspiciousUserActivityUseCase(
                    self.uow_factory(), self.audit_log, self.policy
                ).execute(user_id),
                "ip_fraud": DetectIPBasedFraudUseCase(
                    self.uow_factory(), self.audit_log, self.policy
                ).execute(),
                "anomalies": DetectAnomaliesUseCase(
                    self.uow_factory(), self.audit_log, self.policy
                ).execute(),
            },
            timeout=self.timeout,
        )

        user_activity = results["user_activity"]
        if user_activity.is_err() and user_activity.error.code == "USER_NOT_FOUND":
            return Return.err(user_activity.error)

        failures = [
            CheckFailure(check=name, code=result.error.code, message=result.error.message)
            for name, result in results.items()
            if result.is_err()
        ]

        ip_fraud = results["ip_fraud"]
        anomalies = results["anomalies"]
        report = ComprehensiveFraudReport(
            user_id=str(user_id),
            user_activity_risk=user_activity.value.risk_level if user_activity.is_ok() else None,
            ip_fraud_risk=(
                (RiskLevel.HIGH if ip_fraud.value.suspicious_ips else RiskLevel.LOW)
                if ip_fraud.is_ok()
                else None
            ),
            anomaly_risk=(
                (RiskLevel.MEDIUM if anomalies.value.anomalies else RiskLevel.LOW)
                if anomalies.is_ok()
                else None
            ),
            failures=failures,
        )

        await self.audit_log.record(
            ActionKind.COMPREHENSIVE_FRAUD_CHECK,
            details={
                "user_activity_risk": label_value(report.user_activity_risk),
                "ip_fraud_risk": label_value(report.ip_fraud_risk),
                "anomaly_risk": label_value(report.anomaly_risk),
                "failures": [f.check for f in failures],
            },
            actor_id=user_id,
        )

        return Return.ok(report)
