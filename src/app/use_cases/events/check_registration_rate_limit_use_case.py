"""
Check Registration Rate Limit Use Case

Caps how many events one account can register for per 24 hours.
"""

from datetime import timedelta
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit_log_service import AuditLogService
from src.app.services.risk_scorer import RiskPolicy, load_risk_policy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import ActionKind
from .dtos import RateLimitDecision

RATE_LIMIT_MESSAGE = "Registration limit exceeded. Please try again later."


class CheckRegistrationRateLimitUseCase:
    """
    Business Rules:
    - Counts the user's registrations in the trailing 24h
    - Denied when count >= policy.registration_rate_limit (10)
    - A denial is written back as REGISTRATION_RATE_LIMIT_EXCEEDED
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

    async def execute(self, user_id: UUID, event_id: UUID) -> Result[RateLimitDecision]:
        since = utcnow() - timedelta(hours=self.policy.activity_window_hours)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            count = await self.uow.events.count_registrations_since(user_id, since)

        if count >= self.policy.registration_rate_limit:
            await self.audit_log.record(
                ActionKind.REGISTRATION_RATE_LIMIT_EXCEEDED,
                details={"event_id": str(event_id), "registration_count": count},
                actor_id=user_id,
                success=False,
            )
            return Return.ok(
                RateLimitDecision(
                    allowed=False, registration_count=count, message=RATE_LIMIT_MESSAGE
                )
            )

        return Return.ok(RateLimitDecision(allowed=True, registration_count=count))
