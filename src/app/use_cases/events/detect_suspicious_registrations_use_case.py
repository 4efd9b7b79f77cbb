"""
Detect Suspicious Registrations Use Case

Looks for many participants of one event sharing an IP address.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.risk_scorer import RiskPolicy, load_risk_policy
from src.app.services.unit_of_work import UnitOfWork
from .dtos import SuspiciousRegistrationReport


class DetectSuspiciousRegistrationsUseCase:
    """
    Business Rules:
    - Participants are grouped by their account IP
    - Participants without a recorded IP are not grouped together
    - An IP with more than 5 registrations marks potential fraud
    """

    def __init__(self, uow: UnitOfWork, policy: Optional[RiskPolicy] = None):
        self.uow = uow
        self.policy = policy or load_risk_policy()

    async def execute(self, event_id: UUID) -> Result[SuspiciousRegistrationReport]:
        async with self.uow:
            event = await self.uow.events.get_by_id(event_id)
            if event is None:
                return Return.err(Error("EVENT_NOT_FOUND", "Event not found"))

            groups = await self.uow.events.group_participants_by_ip(event_id)

        suspicious = [
            group
            for group in groups
            if group.ip_address is not None
            and group.registration_count > self.policy.registration_ip_cluster_threshold
        ]

        return Return.ok(
            SuspiciousRegistrationReport(
                suspicious_registrations=suspicious, potential_fraud=bool(suspicious)
            )
        )
