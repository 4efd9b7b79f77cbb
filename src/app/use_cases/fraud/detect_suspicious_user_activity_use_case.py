"""
Detect Suspicious User Activity Use Case

Scores one account against its own activity in the trailing window.
"""

from datetime import timedelta
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit_log_service import AuditLogService
from src.app.services.risk_scorer import (
    RiskPolicy,
    calculate_risk_score,
    distinct_devices,
    distinct_locations,
    load_risk_policy,
)
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.audit.dtos import AuditEventView
from src.domain.base import utcnow
from src.domain.entities import ActionKind
from .dtos import ContextualRisks, SuspiciousActivityReport


class DetectSuspiciousUserActivityUseCase:
    """
    Use case for per-user activity risk.

    Business Rules:
    - Window is the trailing policy.activity_window_hours (24h)
    - Diagnostic audit entries are not part of the window
    - Contextual flags use their own thresholds (>2), distinct from
      the score's device/location thresholds (>3)
    - The assessment is written back as ADVANCED_RISK_ASSESSMENT
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

    async def execute(self, user_id: UUID) -> Result[SuspiciousActivityReport]:
        now = utcnow()
        since = now - timedelta(hours=self.policy.activity_window_hours)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            events = await self.uow.audit_events.list_by_actor_since(user_id, since)

            assessment = calculate_risk_score(user, events, self.policy, now)
            contextual_risks = ContextualRisks(
                multiple_devices=len(distinct_devices(events))
                > self.policy.contextual_device_threshold,
                geographical_inconsistency=len(distinct_locations(events))
                > self.policy.contextual_location_threshold,
            )
            activities = [AuditEventView.from_entity(e) for e in events]

        await self.audit_log.record(
            ActionKind.ADVANCED_RISK_ASSESSMENT,
            details={
                "risk_score": assessment.score,
                "risk_level": assessment.level.value,
                "contextual_risks": contextual_risks.model_dump(),
                "suspicious_activities_count": len(activities),
            },
            actor_id=user_id,
        )

        return Return.ok(
            SuspiciousActivityReport(
                user_id=str(user_id),
                risk_score=assessment.score,
                risk_level=assessment.level,
                assessment=assessment,
                suspicious_activities=activities,
                contextual_risks=contextual_risks,
            )
        )
