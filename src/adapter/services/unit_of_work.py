from typing import Callable

from sqlalchemy import text
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.event_repository import EventRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork, UnitOfWorkFactory


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession, owns_session: bool = False):
        self.session = session
        self.owns_session = owns_session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.events = EventRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()
        if self.owns_session:
            await self.session.close()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()

    async def ping(self) -> None:
        await self.session.execute(text("SELECT 1"))


def make_unit_of_work_factory(
    session_factory: Callable[[], AsyncSession],
) -> UnitOfWorkFactory:
    """Each call opens a fresh session, closed when the unit of work exits."""

    def factory() -> UnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory(), owns_session=True)

    return factory
