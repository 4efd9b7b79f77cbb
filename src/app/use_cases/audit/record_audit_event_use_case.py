"""
Record Audit Event Use Case

Appends an action reported by another part of the platform.
"""

from pydantic import ValidationError

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.audit_details import parse_details
from src.domain.entities import DIAGNOSTIC_ACTIONS, AuditEvent
from .dtos import RecordAuditEventCommand, RecordAuditEventResponse


class RecordAuditEventUseCase:
    """
    Use case for appending an audit event.

    Business Rules:
    - Details must fit the payload shape registered for the action
    - Diagnostic kinds are reserved for the detectors and rejected here
    - Events are never updated afterwards
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, command: RecordAuditEventCommand
    ) -> Result[RecordAuditEventResponse]:
        if command.action in DIAGNOSTIC_ACTIONS:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    f"{command.action.value} is reserved for internal detectors",
                )
            )

        try:
            details = parse_details(command.action, command.details)
        except ValidationError as exc:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    f"Invalid details for {command.action.value}: {exc.error_count()} error(s)",
                )
            )

        async with self.uow:
            audit = AuditEvent(
                actor_id=command.actor_id,
                actor_name=command.actor_name,
                actor_role=command.actor_role,
                action=command.action.value,
                details=details,
                ip_address=command.ip_address,
                user_agent=command.user_agent,
                success=command.success,
            )
            audit = await self.uow.audit_events.create(audit)
            await self.uow.commit()

            return Return.ok(RecordAuditEventResponse(id=audit.id))
