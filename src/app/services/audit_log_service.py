"""
Audit Log Service

Writes the detectors' own findings to the audit log. Each entry is
written in its own unit of work so a broken audit sink can neither roll
back nor block the decision that produced it.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWorkFactory
from src.domain.audit_details import parse_details
from src.domain.entities import ActionKind, AuditEvent

logger = logging.getLogger(__name__)


class AuditLogService:
    def __init__(self, uow_factory: UnitOfWorkFactory):
        self.uow_factory = uow_factory

    async def record(
        self,
        action: ActionKind,
        details: Optional[Dict[str, Any]] = None,
        actor_id: Optional[UUID] = None,
        success: bool = True,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[int]:
        """
        Append an audit entry, fail-open.

        Returns the new event id, or None when the write failed.
        """
        try:
            audit = AuditEvent(
                actor_id=actor_id,
                action=action.value,
                details=parse_details(action, details),
                success=success,
                ip_address=ip_address,
                user_agent=user_agent,
            )
            async with self.uow_factory() as uow:
                audit = await uow.audit_events.create(audit)
                await uow.commit()
                return audit.id
        except Exception:
            logger.exception(f"Failed to record audit event {action.value}")
            return None
