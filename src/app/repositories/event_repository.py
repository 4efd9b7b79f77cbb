from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from src.domain.entities import Event


class RegistrationIPGroup(BaseModel):
    """Participants of one event sharing an account IP"""

    ip_address: Optional[str]
    registration_count: int
    users: List[str]


class IEventRepository(ABC):
    """Event repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, event_id: UUID) -> Optional[Event]:
        """Get event by ID"""
        pass

    @abstractmethod
    async def list_participants(self, event_id: UUID) -> List[UUID]:
        """User IDs registered for an event"""
        pass

    @abstractmethod
    async def count_participants(self, event_id: UUID) -> int:
        """Number of registrations for an event"""
        pass

    @abstractmethod
    async def count_registrations_since(self, user_id: UUID, since: datetime) -> int:
        """Registrations made by a user at or after since"""
        pass

    @abstractmethod
    async def count_registrations_by_user(self, user_ids: List[UUID]) -> Dict[UUID, int]:
        """Total registrations per user; users with none are absent"""
        pass

    @abstractmethod
    async def group_participants_by_ip(self, event_id: UUID) -> List[RegistrationIPGroup]:
        """Registrations of an event grouped by the participants' account IP"""
        pass

    @abstractmethod
    async def count_events_with_ip_clusters(self, min_registrations: int) -> int:
        """Events having more than min_registrations participants from one IP"""
        pass

    @abstractmethod
    async def count_all(self) -> int:
        """Total number of events"""
        pass

    @abstractmethod
    async def count_created_since(self, since: datetime) -> int:
        """Events created at or after since"""
        pass
