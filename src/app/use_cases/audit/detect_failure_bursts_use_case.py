"""
Detect Failure Bursts Use Case

Finds users repeatedly failing the same action in the last 24 hours.
"""

from datetime import timedelta
from typing import Optional

from libs.result import Result, Return
from src.app.services.risk_scorer import RiskPolicy, load_risk_policy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import FailureBurstReport


class DetectFailureBurstsUseCase:
    """
    Business Rules:
    - Only failed, non-diagnostic events count
    - A (user, action) pair is reported above policy.failure_burst_threshold failures
    """

    def __init__(self, uow: UnitOfWork, policy: Optional[RiskPolicy] = None):
        self.uow = uow
        self.policy = policy or load_risk_policy()

    async def execute(self) -> Result[FailureBurstReport]:
        now = utcnow()
        since = now - timedelta(hours=self.policy.activity_window_hours)
        async with self.uow:
            bursts = await self.uow.audit_events.aggregate_failure_bursts(
                since, self.policy.failure_burst_threshold
            )

        return Return.ok(
            FailureBurstReport(potential_security_threats=bursts, detected_at=now)
        )
