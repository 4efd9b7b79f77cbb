"""
Assess Registration Risk Use Case

Scores a (user, event) registration and recommends step-up verification.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit_log_service import AuditLogService
from src.app.services.risk_scorer import (
    RiskPolicy,
    calculate_registration_risk,
    load_risk_policy,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import ActionKind, RiskLevel
from .dtos import RegistrationRiskAssessment


class AssessRegistrationRiskUseCase:
    """
    Business Rules:
    - Uses the registration scorer (calculate_registration_risk), not the
      account activity score: its signals are account age, past
      registrations and event fill ratio, with its own level cut-offs
    - Never blocks; any level above LOW requires additional verification
    - Written back as REGISTRATION_RISK_ASSESSMENT
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

    async def execute(
        self, user_id: UUID, event_id: UUID
    ) -> Result[RegistrationRiskAssessment]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            event = await self.uow.events.get_by_id(event_id)
            if event is None:
                return Return.err(Error("EVENT_NOT_FOUND", "Event not found"))

            past = await self.uow.events.count_registrations_by_user([user_id])
            participant_count = await self.uow.events.count_participants(event_id)

            assessment = calculate_registration_risk(
                user,
                past_registrations=past.get(user_id, 0),
                participant_count=participant_count,
                capacity=event.capacity,
                policy=self.policy,
            )

        await self.audit_log.record(
            ActionKind.REGISTRATION_RISK_ASSESSMENT,
            details={
                "event_id": str(event_id),
                "risk_score": assessment.score,
                "risk_level": assessment.level.value,
            },
            actor_id=user_id,
        )

        return Return.ok(
            RegistrationRiskAssessment(
                risk_level=assessment.level,
                risk_score=assessment.score,
                requires_additional_verification=assessment.level != RiskLevel.LOW,
                assessment=assessment,
            )
        )
