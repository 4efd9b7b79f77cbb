from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import AuditEvent


class AuditEventFilter(BaseModel):
    """Filter for audit event listing; unset fields do not restrict"""

    actor_id: Optional[UUID] = None
    action: Optional[str] = None
    success: Optional[bool] = None
    ip_address: Optional[str] = None
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    include_diagnostic: bool = True


class IPFailureAggregate(BaseModel):
    """Failed events rolled up per source IP"""

    ip_address: str
    failed_attempts: int
    unique_users: List[str]
    actions: List[str]


class ActionStats(BaseModel):
    """Per-action rollup for the security report"""

    action: str
    total_count: int
    success_count: int
    failure_count: int
    success_rate: float
    unique_user_count: int


class FailureBurst(BaseModel):
    """A (user, action) pair with repeated failures"""

    actor_id: Optional[str]
    actor_name: Optional[str]
    action: str
    failure_count: int


class IAuditEventRepository(ABC):
    """AuditEvent repository interface - application layer"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Append a new audit event (immutable)"""
        pass

    @abstractmethod
    async def get_paginated(
        self,
        filters: AuditEventFilter,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[AuditEvent], Optional[str]]:
        """
        Get filtered audit events with cursor-based pagination.

        Returns:
            Tuple of (events list, next_cursor)
            - events: ordered by created_at DESC, id DESC
            - next_cursor: Cursor for next page, None if no more events
        """
        pass

    @abstractmethod
    async def list_by_actor_since(
        self, actor_id: UUID, since: datetime
    ) -> List[AuditEvent]:
        """Non-diagnostic events of one actor since a point in time, oldest first"""
        pass

    @abstractmethod
    async def aggregate_failures_by_ip(self, since: datetime) -> List[IPFailureAggregate]:
        """Failed non-diagnostic events since a point in time, grouped by IP"""
        pass

    @abstractmethod
    async def aggregate_by_action(self, since: datetime) -> List[ActionStats]:
        """Per-action totals since a point in time, busiest action first"""
        pass

    @abstractmethod
    async def aggregate_failure_bursts(
        self, since: datetime, min_failures: int
    ) -> List[FailureBurst]:
        """(actor, action) pairs with more than min_failures failures"""
        pass

    @abstractmethod
    async def count_actors_with_failures(self, since: datetime) -> int:
        """Distinct actors with at least one failed non-diagnostic event"""
        pass

    @abstractmethod
    async def list_recent_by_action(self, action: str, limit: int) -> List[AuditEvent]:
        """Latest events of a single action kind"""
        pass
