import base64
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple
from uuid import UUID

from sqlalchemy import and_, case, func, or_
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.audit_event_repository import (
    ActionStats,
    AuditEventFilter,
    FailureBurst,
    IAuditEventRepository,
    IPFailureAggregate,
)
from src.domain.entities import DIAGNOSTIC_ACTIONS, AuditEvent

DIAGNOSTIC_ACTION_VALUES = [a.value for a in DIAGNOSTIC_ACTIONS]


def encode_cursor(event: AuditEvent) -> str:
    raw = f"{event.created_at.isoformat()}|{event.id}"
    return base64.b64encode(raw.encode("utf-8")).decode("utf-8")


def decode_cursor(cursor: str) -> Optional[Tuple[datetime, int]]:
    try:
        raw = base64.b64decode(cursor).decode("utf-8")
        timestamp_str, event_id = raw.split("|", 1)
        return datetime.fromisoformat(timestamp_str), int(event_id)
    except (ValueError, TypeError):
        return None


def not_diagnostic():
    return col(AuditEvent.action).not_in(DIAGNOSTIC_ACTION_VALUES)


class AuditEventRepository(IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Append a new audit event (immutable)"""
        self.session.add(audit_event)
        await self.session.flush()
        await self.session.refresh(audit_event)
        return audit_event

    async def get_paginated(
        self,
        filters: AuditEventFilter,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[AuditEvent], Optional[str]]:
        """
        Get filtered audit events with cursor-based pagination.

        Cursor format: base64-encoded "<created_at ISO>|<id>" of the last
        event returned, so events sharing a timestamp are not skipped.
        """
        stmt = select(AuditEvent)

        if filters.actor_id is not None:
            stmt = stmt.where(AuditEvent.actor_id == filters.actor_id)
        if filters.action is not None:
            stmt = stmt.where(AuditEvent.action == filters.action)
        if filters.success is not None:
            stmt = stmt.where(AuditEvent.success == filters.success)
        if filters.ip_address is not None:
            stmt = stmt.where(AuditEvent.ip_address == filters.ip_address)
        if filters.since is not None:
            stmt = stmt.where(AuditEvent.created_at >= filters.since)
        if filters.until is not None:
            stmt = stmt.where(AuditEvent.created_at <= filters.until)
        if not filters.include_diagnostic:
            stmt = stmt.where(not_diagnostic())

        if cursor:
            position = decode_cursor(cursor)
            # Invalid cursor: ignore and return from the beginning
            if position is not None:
                cursor_timestamp, cursor_id = position
                stmt = stmt.where(
                    or_(
                        AuditEvent.created_at < cursor_timestamp,
                        and_(
                            AuditEvent.created_at == cursor_timestamp,
                            col(AuditEvent.id) < cursor_id,
                        ),
                    )
                )

        stmt = stmt.order_by(
            col(AuditEvent.created_at).desc(), col(AuditEvent.id).desc()
        ).limit(limit + 1)

        result = await self.session.exec(stmt)
        events = list(result.all())

        has_more = len(events) > limit
        if has_more:
            events = events[:limit]

        next_cursor = encode_cursor(events[-1]) if has_more and events else None
        return events, next_cursor

    async def list_by_actor_since(
        self, actor_id: UUID, since: datetime
    ) -> List[AuditEvent]:
        """Non-diagnostic events of one actor since a point in time, oldest first"""
        stmt = (
            select(AuditEvent)
            .where(
                AuditEvent.actor_id == actor_id,
                AuditEvent.created_at >= since,
                not_diagnostic(),
            )
            .order_by(col(AuditEvent.created_at), col(AuditEvent.id))
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def aggregate_failures_by_ip(self, since: datetime) -> List[IPFailureAggregate]:
        """
        Failed non-diagnostic events grouped by IP.

        Grouped by (ip, actor, action) in SQL, folded per IP here so the
        distinct-user list stays portable across database backends.
        Events without an IP are skipped.
        """
        stmt = (
            select(
                AuditEvent.ip_address,
                AuditEvent.actor_id,
                AuditEvent.action,
                func.count().label("failures"),
            )
            .where(
                AuditEvent.created_at >= since,
                AuditEvent.success == False,  # noqa: E712
                col(AuditEvent.ip_address).is_not(None),
                not_diagnostic(),
            )
            .group_by(AuditEvent.ip_address, AuditEvent.actor_id, AuditEvent.action)
        )
        result = await self.session.execute(stmt)

        failures: Dict[str, int] = defaultdict(int)
        users: Dict[str, Set[str]] = defaultdict(set)
        actions: Dict[str, Set[str]] = defaultdict(set)
        for ip_address, actor_id, action, count in result.all():
            failures[ip_address] += count
            if actor_id is not None:
                users[ip_address].add(str(actor_id))
            actions[ip_address].add(action)

        return [
            IPFailureAggregate(
                ip_address=ip_address,
                failed_attempts=failures[ip_address],
                unique_users=sorted(users[ip_address]),
                actions=sorted(actions[ip_address]),
            )
            for ip_address in sorted(failures)
        ]

    async def aggregate_by_action(self, since: datetime) -> List[ActionStats]:
        """Per-action totals since a point in time, busiest action first"""
        success_case = case((AuditEvent.success == True, 1), else_=0)  # noqa: E712
        failure_case = case((AuditEvent.success == False, 1), else_=0)  # noqa: E712
        total = func.count().label("total")
        stmt = (
            select(
                AuditEvent.action,
                total,
                func.sum(success_case).label("successes"),
                func.sum(failure_case).label("failures"),
                func.count(func.distinct(AuditEvent.actor_id)).label("unique_users"),
            )
            .where(AuditEvent.created_at >= since)
            .group_by(AuditEvent.action)
            .order_by(total.desc())
        )
        result = await self.session.execute(stmt)

        return [
            ActionStats(
                action=action,
                total_count=count,
                success_count=successes or 0,
                failure_count=failures or 0,
                success_rate=(successes or 0) / count if count else 0.0,
                unique_user_count=unique_users,
            )
            for action, count, successes, failures, unique_users in result.all()
        ]

    async def aggregate_failure_bursts(
        self, since: datetime, min_failures: int
    ) -> List[FailureBurst]:
        """(actor, action) pairs with more than min_failures failures"""
        failure_count = func.count().label("failure_count")
        stmt = (
            select(
                AuditEvent.actor_id,
                AuditEvent.actor_name,
                AuditEvent.action,
                failure_count,
            )
            .where(
                AuditEvent.created_at >= since,
                AuditEvent.success == False,  # noqa: E712
                not_diagnostic(),
            )
            .group_by(AuditEvent.actor_id, AuditEvent.actor_name, AuditEvent.action)
            .having(func.count() > min_failures)
            .order_by(failure_count.desc())
        )
        result = await self.session.execute(stmt)

        return [
            FailureBurst(
                actor_id=str(actor_id) if actor_id is not None else None,
                actor_name=actor_name,
                action=action,
                failure_count=count,
            )
            for actor_id, actor_name, action, count in result.all()
        ]

    async def count_actors_with_failures(self, since: datetime) -> int:
        """Distinct actors with at least one failed non-diagnostic event"""
        stmt = select(func.count(func.distinct(AuditEvent.actor_id))).where(
            AuditEvent.created_at >= since,
            AuditEvent.success == False,  # noqa: E712
            col(AuditEvent.actor_id).is_not(None),
            not_diagnostic(),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def list_recent_by_action(self, action: str, limit: int) -> List[AuditEvent]:
        """Latest events of a single action kind"""
        stmt = (
            select(AuditEvent)
            .where(AuditEvent.action == action)
            .order_by(col(AuditEvent.created_at).desc(), col(AuditEvent.id).desc())
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all())
