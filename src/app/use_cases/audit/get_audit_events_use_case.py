"""
Get Audit Events Use Case

Retrieves audit events with filtering and cursor pagination.
"""

from typing import Optional

from libs.result import Error, Result, Return
from src.app.repositories.audit_event_repository import AuditEventFilter
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import UserRole
from .dtos import AuditEventView, AuditEventsPage


class GetAuditEventsUseCase:
    """
    Use case for listing audit events.

    Business Rules:
    - Caller must have role=admin
    - Results ordered newest first, ties by insertion order
    - Supports cursor-based pagination
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        role: str,
        filters: AuditEventFilter,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[AuditEventsPage]:
        if role != UserRole.admin.value:
            return Return.err(
                Error("INSUFFICIENT_ROLE", "You do not have permission to view audit events")
            )

        if filters.since and filters.until and filters.since > filters.until:
            return Return.err(Error("VALIDATION_FAILED", "since must not be after until"))

        async with self.uow:
            events, next_cursor = await self.uow.audit_events.get_paginated(
                filters, limit=limit, cursor=cursor
            )

            return Return.ok(
                AuditEventsPage(
                    events=[AuditEventView.from_entity(e) for e in events],
                    next_cursor=next_cursor,
                )
            )
