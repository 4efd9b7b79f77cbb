"""
Get System Health Use Case

Point-in-time process, host and database snapshot.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.system_probe import SystemProbe
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from .dtos import ConnectionState, DatabaseStatus, SystemHealth

logger = logging.getLogger(__name__)


class GetSystemHealthUseCase:
    """
    Business Rules:
    - A database that does not answer is reported DISCONNECTED
    - Any other probe failure fails the whole report; no partial snapshot
    """

    def __init__(
        self,
        uow: UnitOfWork,
        probe: Optional[SystemProbe] = None,
        timeout: Optional[float] = None,
    ):
        self.uow = uow
        self.probe = probe or SystemProbe()
        self.timeout = timeout or ApplicationConfig.CHECK_TIMEOUT_SECONDS

    async def database_state(self) -> ConnectionState:
        try:
            async with self.uow:
                await asyncio.wait_for(self.uow.ping(), timeout=self.timeout)
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
            logger.warning(f"Database ping failed: {exc}")
            return ConnectionState.DISCONNECTED
        return ConnectionState.CONNECTED

    async def execute(self) -> Result[SystemHealth]:
        database = DatabaseStatus(connection_state=await self.database_state())

        try:
            health = SystemHealth(
                timestamp=utcnow(),
                cpu=self.probe.cpu(),
                memory=self.probe.memory(),
                heap=self.probe.heap(),
                database=database,
                disk=self.probe.disk(),
                uptime_seconds=self.probe.uptime(),
            )
        except Exception as exc:
            logger.exception("System health probe failed")
            return Return.err(Error("INTERNAL_COMPUTATION", f"System health probe failed: {exc}"))

        return Return.ok(health)
