"""
Generate Security Report Use Case

Per-action rollup of the audit log over a trailing window.
"""

from datetime import timedelta

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import SecurityReport


class GenerateSecurityReportUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, timeframe_days: int = 30) -> Result[SecurityReport]:
        if timeframe_days < 1:
            return Return.err(Error("VALIDATION_FAILED", "timeframe_days must be positive"))

        now = utcnow()
        async with self.uow:
            breakdown = await self.uow.audit_events.aggregate_by_action(
                now - timedelta(days=timeframe_days)
            )

        return Return.ok(
            SecurityReport(
                timeframe_days=timeframe_days,
                generated_at=now,
                action_breakdown=breakdown,
            )
        )
