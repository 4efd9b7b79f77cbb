from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_logged_in_since(self, since: datetime) -> List[User]:
        """Users whose last login is at or after since"""
        stmt = select(User).where(User.last_login_at >= since)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_all(self) -> int:
        """Total number of users"""
        result = await self.session.execute(select(func.count()).select_from(User))
        return result.scalar_one()

    async def count_created_since(self, since: datetime) -> int:
        """Users created at or after since"""
        stmt = select(func.count()).select_from(User).where(User.created_at >= since)
        result = await self.session.execute(stmt)
        return result.scalar_one()
