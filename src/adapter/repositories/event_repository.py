from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.event_repository import IEventRepository, RegistrationIPGroup
from src.domain.entities import Event, EventParticipant, User


class EventRepository(IEventRepository):
    """Event repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, event_id: UUID) -> Optional[Event]:
        """Get event by ID"""
        stmt = select(Event).where(Event.id == event_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_participants(self, event_id: UUID) -> List[UUID]:
        """User IDs registered for an event"""
        stmt = select(EventParticipant.user_id).where(EventParticipant.event_id == event_id)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_participants(self, event_id: UUID) -> int:
        """Number of registrations for an event"""
        stmt = (
            select(func.count())
            .select_from(EventParticipant)
            .where(EventParticipant.event_id == event_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def count_registrations_since(self, user_id: UUID, since: datetime) -> int:
        """Registrations made by a user at or after since"""
        stmt = (
            select(func.count())
            .select_from(EventParticipant)
            .where(
                EventParticipant.user_id == user_id,
                EventParticipant.registered_at >= since,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def count_registrations_by_user(self, user_ids: List[UUID]) -> Dict[UUID, int]:
        """Total registrations per user; users with none are absent"""
        if not user_ids:
            return {}
        stmt = (
            select(EventParticipant.user_id, func.count())
            .where(col(EventParticipant.user_id).in_(user_ids))
            .group_by(EventParticipant.user_id)
        )
        result = await self.session.execute(stmt)
        return {user_id: count for user_id, count in result.all()}

    async def group_participants_by_ip(self, event_id: UUID) -> List[RegistrationIPGroup]:
        """Registrations of an event grouped by the participants' account IP"""
        stmt = (
            select(User.ip_address, User.id)
            .join(EventParticipant, EventParticipant.user_id == User.id)
            .where(EventParticipant.event_id == event_id)
        )
        result = await self.session.execute(stmt)

        groups: Dict[Optional[str], List[str]] = defaultdict(list)
        for ip_address, user_id in result.all():
            groups[ip_address].append(str(user_id))

        return [
            RegistrationIPGroup(
                ip_address=ip_address,
                registration_count=len(users),
                users=sorted(users),
            )
            for ip_address, users in groups.items()
        ]

    async def count_events_with_ip_clusters(self, min_registrations: int) -> int:
        """Events having more than min_registrations participants from one IP"""
        clusters = (
            select(EventParticipant.event_id)
            .join(User, EventParticipant.user_id == User.id)
            .where(col(User.ip_address).is_not(None))
            .group_by(EventParticipant.event_id, User.ip_address)
            .having(func.count() > min_registrations)
            .subquery()
        )
        stmt = select(func.count(func.distinct(clusters.c.event_id)))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def count_all(self) -> int:
        """Total number of events"""
        result = await self.session.execute(select(func.count()).select_from(Event))
        return result.scalar_one()

    async def count_created_since(self, since: datetime) -> int:
        """Events created at or after since"""
        stmt = select(func.count()).select_from(Event).where(Event.created_at >= since)
        result = await self.session.execute(stmt)
        return result.scalar_one()
