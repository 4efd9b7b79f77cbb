from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def list_logged_in_since(self, since: datetime) -> List[User]:
        """Users whose last login is at or after since"""
        pass

    @abstractmethod
    async def count_all(self) -> int:
        """Total number of users"""
        pass

    @abstractmethod
    async def count_created_since(self, since: datetime) -> int:
        """Users created at or after since"""
        pass
