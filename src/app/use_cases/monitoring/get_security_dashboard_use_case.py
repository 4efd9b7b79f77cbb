"""
Get Security Dashboard Use Case

One admin view over health, anomalies, the security report and
account/event statistics for the last 24 hours.
"""

from datetime import timedelta
from typing import Optional

from libs.result import Result, Return
from src.app.services.audit_log_service import AuditLogService
from src.app.services.concurrent_checks import gather_checks
from src.app.services.risk_scorer import RiskPolicy, load_risk_policy
from src.app.services.system_probe import SystemProbe
from src.app.services.unit_of_work import UnitOfWorkFactory
from src.app.use_cases.audit.generate_security_report_use_case import (
    GenerateSecurityReportUseCase,
)
from src.app.use_cases.fraud.detect_anomalies_use_case import DetectAnomaliesUseCase
from src.domain.base import utcnow
from .dtos import EventSecurityStats, SecurityDashboard, UserSecurityStats
from .get_system_health_use_case import GetSystemHealthUseCase


class GetSecurityDashboardUseCase:
    """
    Business Rules:
    - Sections are gathered concurrently, each in its own unit of work
    - Suspicious users: accounts with failed non-diagnostic events in 24h
    - Suspicious events: events with more than 5 registrations from one IP
    - Any failed section fails the dashboard
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        audit_log: AuditLogService,
        policy: Optional[RiskPolicy] = None,
        probe: Optional[SystemProbe] = None,
        timeout: Optional[float] = None,
    ):
        self.uow_factory = uow_factory
        self.audit_log = audit_log
        self.policy = policy or load_risk_policy()
        self.probe = probe
        self.timeout = timeout

    async def user_stats(self) -> Result[UserSecurityStats]:
        since = utcnow() - timedelta(hours=self.policy.activity_window_hours)
        async with self.uow_factory() as uow:
            total = await uow.users.count_all()
            new = await uow.users.count_created_since(since)
            suspicious = await uow.audit_events.count_actors_with_failures(since)
        return Return.ok(
            UserSecurityStats(total_users=total, new_users=new, suspicious_users=suspicious)
        )

    async def event_stats(self) -> Result[EventSecurityStats]:
        since = utcnow() - timedelta(hours=self.policy.activity_window_hours)
        async with self.uow_factory() as uow:
            total = await uow.events.count_all()
            new = await uow.events.count_created_since(since)
            suspicious = await uow.events.count_events_with_ip_clusters(
                self.policy.registration_ip_cluster_threshold
            )
        return Return.ok(
            EventSecurityStats(total_events=total, new_events=new, suspicious_events=suspicious)
        )

    async def execute(self) -> Result[SecurityDashboard]:
        results = await gather_checks(
            {
                "system_health": GetSystemHealthUseCase(
                    self.uow_factory(), self.probe
                ).execute(),
                "fraud_detection": DetectAnomaliesUseCase(
                    self.uow_factory(), self.audit_log, self.policy
                ).execute(),
                "security_report": GenerateSecurityReportUseCase(
                    self.uow_factory()
                ).execute(),
                "user_stats": self.user_stats(),
                "event_stats": self.event_stats(),
            },
            timeout=self.timeout,
        )

        for result in results.values():
            if result.is_err():
                return Return.err(result.error)

        return Return.ok(
            SecurityDashboard(
                **{name: result.value for name, result in results.items()},
                timestamp=utcnow(),
            )
        )
