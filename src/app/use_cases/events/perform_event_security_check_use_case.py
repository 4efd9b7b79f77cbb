"""
Perform Event Security Check Use Case

Registration guard: one allow/deny decision composed from the rate
limit, registration risk and suspicious-registration checks.
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.audit_log_service import AuditLogService
from src.app.services.concurrent_checks import gather_checks
from src.app.services.risk_scorer import RiskPolicy, load_risk_policy
from src.app.services.unit_of_work import UnitOfWorkFactory
from src.app.use_cases.fraud.dtos import CheckFailure
from src.domain.entities import ActionKind
from .assess_registration_risk_use_case import AssessRegistrationRiskUseCase
from .check_registration_rate_limit_use_case import CheckRegistrationRateLimitUseCase
from .detect_suspicious_registrations_use_case import DetectSuspiciousRegistrationsUseCase
from .dtos import EventSecurityDecision

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = ("USER_NOT_FOUND", "EVENT_NOT_FOUND")


class PerformEventSecurityCheckUseCase:
    """
    Business Rules:
    - The three checks run concurrently, each in its own unit of work
    - allowed = rate limit ok AND no suspicious registrations
    - Risk level never blocks; it only sets requires_additional_verification
    - If the rate limit or suspicious-registration check fails, the
      decision fails closed (allowed=False)
    - If only the risk check fails, verification is still required
    - An unknown user or event is NotFound for the whole check
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

    async def execute(self, user_id: UUID, event_id: UUID) -> Result[EventSecurityDecision]:
        results = await gather_checks(
            {
                "rate_limit": CheckRegistrationRateLimitUseCase(
                    self.uow_factory(), self.audit_log, self.policy
                ).execute(user_id, event_id),
                "risk_assessment": AssessRegistrationRiskUseCase(
                    self.uow_factory(), self.audit_log, self.policy
                ).execute(user_id, event_id),
                "suspicious_registrations": DetectSuspiciousRegistrationsUseCase(
                    self.uow_factory(), self.policy
                ).execute(event_id),
            },
            timeout=self.timeout,
        )

        for result in results.values():
            if result.is_err() and result.error.code in NOT_FOUND_CODES:
                return Return.err(result.error)

        failures = [
            CheckFailure(check=name, code=result.error.code, message=result.error.message)
            for name, result in results.items()
            if result.is_err()
        ]

        rate_limit = results["rate_limit"]
        risk = results["risk_assessment"]
        suspicious = results["suspicious_registrations"]

        rate_limit_ok = rate_limit.is_ok() and rate_limit.value.allowed
        fraud_detected = suspicious.is_err() or suspicious.value.potential_fraud
        allowed = rate_limit_ok and not fraud_detected
        if failures:
            logger.warning(
                f"Security check for user {user_id} on event {event_id} "
                f"degraded: {[f.check for f in failures]}"
            )

        decision = EventSecurityDecision(
            event_id=str(event_id),
            user_id=str(user_id),
            allowed=allowed,
            requires_additional_verification=(
                risk.value.requires_additional_verification if risk.is_ok() else True
            ),
            rate_limit=rate_limit.value if rate_limit.is_ok() else None,
            risk_assessment=risk.value if risk.is_ok() else None,
            suspicious_registrations=suspicious.value if suspicious.is_ok() else None,
            failures=failures,
        )

        await self.audit_log.record(
            ActionKind.EVENT_SECURITY_CHECK,
            details={
                "event_id": str(event_id),
                "allowed": allowed,
                "failures": [f.check for f in failures],
            },
            actor_id=user_id,
            success=allowed,
        )

        return Return.ok(decision)
