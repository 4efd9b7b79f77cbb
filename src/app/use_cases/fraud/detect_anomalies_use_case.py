"""
Detect Anomalies Use Case

Compares every recently active account against a single population
baseline (mean login count, mean registration count).
"""

from datetime import timedelta
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from libs.result import Result, Return
from src.app.services.audit_log_service import AuditLogService
from src.app.services.risk_scorer import RiskPolicy, load_risk_policy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import ActionKind, User
from .dtos import AccountAnomaly, AnomalyReport, PopulationBaseline


def compute_population_baseline(
    users: Sequence[User], event_counts: Dict[UUID, int]
) -> PopulationBaseline:
    # Empty population falls back to a zero baseline
    if not users:
        return PopulationBaseline(
            population_size=0, avg_login_count=0.0, avg_event_registrations=0.0
        )

    size = len(users)
    return PopulationBaseline(
        population_size=size,
        avg_login_count=sum(u.login_count for u in users) / size,
        avg_event_registrations=sum(event_counts.get(u.id, 0) for u in users) / size,
    )


def find_anomalies(
    users: Sequence[User],
    event_counts: Dict[UUID, int],
    baseline: PopulationBaseline,
    policy: RiskPolicy,
) -> List[AccountAnomaly]:
    anomalies = []
    for user in users:
        event_count = event_counts.get(user.id, 0)
        login_deviation = abs(user.login_count - baseline.avg_login_count)
        event_deviation = abs(event_count - baseline.avg_event_registrations)
        if (
            login_deviation > policy.login_deviation_threshold
            or event_deviation > policy.event_deviation_threshold
        ):
            anomalies.append(
                AccountAnomaly(
                    user_id=str(user.id),
                    username=user.username,
                    login_count=user.login_count,
                    event_count=event_count,
                    login_deviation=login_deviation,
                    event_deviation=event_deviation,
                )
            )
    return anomalies


class DetectAnomaliesUseCase:
    """
    Business Rules:
    - Population: accounts that logged in within policy.anomaly_window_days (30)
    - Deviation is absolute distance from the shared population mean
    - Flag when login deviation > 3 OR event deviation > 2
    - Findings are written back as ANOMALY_DETECTION
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

    async def execute(self) -> Result[AnomalyReport]:
        now = utcnow()
        since = now - timedelta(days=self.policy.anomaly_window_days)

        async with self.uow:
            users = await self.uow.users.list_logged_in_since(since)
            event_counts = await self.uow.events.count_registrations_by_user(
                [u.id for u in users]
            )

            baseline = compute_population_baseline(users, event_counts)
            anomalies = find_anomalies(users, event_counts, baseline, self.policy)

        await self.audit_log.record(
            ActionKind.ANOMALY_DETECTION,
            details={
                "anomalous_users": [a.user_id for a in anomalies],
                "total_anomalies": len(anomalies),
            },
        )

        return Return.ok(AnomalyReport(anomalies=anomalies, baseline=baseline, timestamp=now))
