from abc import ABC, abstractmethod
from typing import Callable

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.event_repository import IEventRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    events: IEventRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Round-trip to the database; raises if it is unreachable"""
        pass


# Concurrent checks each need their own unit of work (one session per task)
UnitOfWorkFactory = Callable[[], UnitOfWork]
