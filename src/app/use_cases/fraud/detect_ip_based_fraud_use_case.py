"""
Detect IP-Based Fraud Use Case

Flags source IPs with too many failures or too many distinct accounts.
"""

from datetime import timedelta
from typing import Optional

from libs.result import Result, Return
from src.app.services.audit_log_service import AuditLogService
from src.app.services.risk_scorer import RiskPolicy, load_risk_policy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import ActionKind
from .dtos import IPFraudReport


class DetectIPBasedFraudUseCase:
    """
    Business Rules:
    - Only failed, non-diagnostic events of the trailing 24h count
    - An IP is suspicious when failures > 10 OR distinct users > 3
    - Findings are written back as IP_FRAUD_DETECTION
    """

    def __init__(
        self,
        uow: UnitOfWork,
        audit_log: AuditLogService,
        policy: Optional[RiskPolicy] = None,
    ):
        self.uow = uow
        self.audit_log = audit_log
        self.policy = policy or load_risk_policy()

    async def execute(self) -> Result[IPFraudReport]:
        now = utcnow()
        since = now - timedelta(hours=self.policy.activity_window_hours)

        async with self.uow:
            per_ip = await self.uow.audit_events.aggregate_failures_by_ip(since)

        suspicious_ips = [
            ip
            for ip in per_ip
            if ip.failed_attempts > self.policy.ip_failed_attempts_threshold
            or len(ip.unique_users) > self.policy.ip_distinct_users_threshold
        ]

        await self.audit_log.record(
            ActionKind.IP_FRAUD_DETECTION,
            details={
                "suspicious_ips": [ip.ip_address for ip in suspicious_ips],
                "total_suspicious_ips": len(suspicious_ips),
            },
        )

        return Return.ok(IPFraudReport(suspicious_ips=suspicious_ips, timestamp=now))
