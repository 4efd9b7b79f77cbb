from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.threat_feed_client import HttpThreatFeedClient
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork, make_unit_of_work_factory
from src.api.utils.jwt import verify_jwt
from src.app.services.audit_log_service import AuditLogService
from src.app.services.threat_intelligence import IThreatFeedClient
from src.app.services.unit_of_work import UnitOfWorkFactory

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_unit_of_work_factory() -> UnitOfWorkFactory:
    """Fresh session per unit of work, for checks that run concurrently."""
    return make_unit_of_work_factory(AsyncSessionLocal)


def get_audit_log(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> AuditLogService:
    return AuditLogService(uow_factory)


def get_threat_feed_client() -> IThreatFeedClient:
    return HttpThreatFeedClient()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing user_id and role

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None or "user_id" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload
