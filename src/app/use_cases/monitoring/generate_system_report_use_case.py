"""
Generate System Report Use Case

Health snapshot, security report and the latest API request entries.
"""

from typing import Optional

from libs.result import Result, Return
from src.app.services.concurrent_checks import gather_checks
from src.app.services.system_probe import SystemProbe
from src.app.services.unit_of_work import UnitOfWorkFactory
from src.app.use_cases.audit.dtos import AuditEventView
from src.app.use_cases.audit.generate_security_report_use_case import (
    GenerateSecurityReportUseCase,
)
from src.domain.base import utcnow
from src.domain.entities import ActionKind
from .dtos import SystemReport
from .get_system_health_use_case import GetSystemHealthUseCase

PERFORMANCE_LOG_LIMIT = 100


class GenerateSystemReportUseCase:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        probe: Optional[SystemProbe] = None,
        timeout: Optional[float] = None,
    ):
        self.uow_factory = uow_factory
        self.probe = probe
        self.timeout = timeout

    async def recent_api_requests(self) -> Result:
        async with self.uow_factory() as uow:
            events = await uow.audit_events.list_recent_by_action(
                ActionKind.API_REQUEST.value, PERFORMANCE_LOG_LIMIT
            )
            return Return.ok([AuditEventView.from_entity(e) for e in events])

    async def execute(self) -> Result[SystemReport]:
        results = await gather_checks(
            {
                "system_health": GetSystemHealthUseCase(
                    self.uow_factory(), self.probe
                ).execute(),
                "security_report": GenerateSecurityReportUseCase(
                    self.uow_factory()
                ).execute(),
                "performance_logs": self.recent_api_requests(),
            },
            timeout=self.timeout,
        )

        for result in results.values():
            if result.is_err():
                return Return.err(result.error)

        return Return.ok(
            SystemReport(
                system_health=results["system_health"].value,
                security_report=results["security_report"].value,
                performance_logs=results["performance_logs"].value,
                generated_at=utcnow(),
            )
        )
