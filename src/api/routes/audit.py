"""
Audit API Routes

Handles audit event ingestion and retrieval endpoints.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from src.api.error import ClientError, ServerError
from src.api.utils.admin_auth import require_admin
from src.app.repositories.audit_event_repository import AuditEventFilter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.audit import (
    AuditEventsPage,
    DetectFailureBurstsUseCase,
    FailureBurstReport,
    GenerateSecurityReportUseCase,
    GetAuditEventsUseCase,
    RecordAuditEventCommand,
    RecordAuditEventResponse,
    RecordAuditEventUseCase,
    SecurityReport,
)
from src.depends import get_current_user, get_unit_of_work
from src.domain.base import as_naive_utc
from src.domain.entities import ActionKind, UserRole

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.post(
    "/events",
    status_code=status.HTTP_201_CREATED,
    response_model=RecordAuditEventResponse,
)
async def record_audit_event(
    command: RecordAuditEventCommand,
    request: Request,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Append an Audit Event

    Non-admin callers can only record events about themselves: the
    actor comes from their JWT, the IP address and user agent from the
    connection itself.

    Raises:
        - 400 Bad Request: Reserved action kind or details not matching the action
        - 401 Unauthorized: Invalid or expired JWT
        - 500 Internal Server Error: Server error
    """
    if current_user.get("role") != UserRole.admin.value:
        command.actor_id = UUID(current_user["user_id"])
        command.actor_role = current_user.get("role")
        command.actor_name = None
        command.ip_address = request.client.host if request.client else None
        command.user_agent = request.headers.get("user-agent")

    use_case = RecordAuditEventUseCase(uow)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_FAILED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.get(
    "/events",
    status_code=status.HTTP_200_OK,
    response_model=AuditEventsPage,
)
async def get_audit_events(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    actor_id: Optional[UUID] = Query(None),
    action: Optional[ActionKind] = Query(None),
    success: Optional[bool] = Query(None),
    ip_address: Optional[str] = Query(None),
    since: Optional[datetime] = Query(None),
    until: Optional[datetime] = Query(None),
    include_diagnostic: bool = Query(True),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of events to return"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
):
    """
    Get Audit Events

    Filtered audit log, newest first. Only accessible by admins.

    Returns:
        - events: List of audit events ordered by newest first
        - next_cursor: Cursor for next page (null if no more events)

    Raises:
        - 400 Bad Request: since is after until
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: Insufficient role
    """
    filters = AuditEventFilter(
        actor_id=actor_id,
        action=action.value if action else None,
        success=success,
        ip_address=ip_address,
        since=as_naive_utc(since),
        until=as_naive_utc(until),
        include_diagnostic=include_diagnostic,
    )

    use_case = GetAuditEventsUseCase(uow)
    result = await use_case.execute(
        role=current_user.get("role"),
        filters=filters,
        limit=limit,
        cursor=cursor,
    )

    if result.is_err():
        error = result.error
        if error.code == "INSUFFICIENT_ROLE":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        if error.code == "VALIDATION_FAILED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.get(
    "/security-report",
    status_code=status.HTTP_200_OK,
    response_model=SecurityReport,
)
async def get_security_report(
    _: dict = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
    timeframe_days: int = Query(30, ge=1, le=365),
):
    """Per-action totals, failures and distinct actors over the trailing window."""
    result = await GenerateSecurityReportUseCase(uow).execute(timeframe_days)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_FAILED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.get(
    "/failure-bursts",
    status_code=status.HTTP_200_OK,
    response_model=FailureBurstReport,
)
async def get_failure_bursts(
    _: dict = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Accounts with repeated failures of one action in the trailing 24 hours."""
    result = await DetectFailureBurstsUseCase(uow).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value
