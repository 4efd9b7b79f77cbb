"""
Event Security API Routes

Registration guard and event access tokens. Callers always act on
themselves; the user comes from the JWT.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.api.error import ClientError, ServerError
from src.app.services.audit_log_service import AuditLogService
from src.app.services.event_access_token import EventAccessToken
from src.app.services.unit_of_work import UnitOfWork, UnitOfWorkFactory
from src.app.use_cases.events import (
    EventAccessTokenUseCase,
    EventSecurityDecision,
    PerformEventSecurityCheckUseCase,
    VerifyAccessTokenResponse,
)
from src.depends import (
    get_audit_log,
    get_current_user,
    get_unit_of_work,
    get_unit_of_work_factory,
)

router = APIRouter(prefix="/events", tags=["Events"])

NOT_FOUND_CODES = ("USER_NOT_FOUND", "EVENT_NOT_FOUND")


class VerifyAccessTokenRequest(BaseModel):
    """POST /events/{event_id}/access-token/verify request payload"""

    token: str


@router.post(
    "/{event_id}/access-token",
    status_code=status.HTTP_201_CREATED,
    response_model=EventAccessToken,
)
async def issue_access_token(
    event_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Issue a 24h access token binding the caller to the event.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 404 Not Found: Unknown event or user
    """
    user_id = UUID(current_user["user_id"])

    result = await EventAccessTokenUseCase(uow).issue(event_id, user_id)

    if result.is_err():
        error = result.error
        if error.code in NOT_FOUND_CODES:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.post(
    "/{event_id}/access-token/verify",
    status_code=status.HTTP_200_OK,
    response_model=VerifyAccessTokenResponse,
)
async def verify_access_token(
    event_id: UUID,
    request: VerifyAccessTokenRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Check a token against the caller and event; valid is false on any mismatch or expiry."""
    user_id = UUID(current_user["user_id"])

    result = await EventAccessTokenUseCase(uow).verify(request.token, event_id, user_id)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_FAILED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.post(
    "/{event_id}/security-check",
    status_code=status.HTTP_200_OK,
    response_model=EventSecurityDecision,
)
async def perform_security_check(
    event_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    """
    Registration guard decision for the caller on this event.

    A denial is a normal 200 response with allowed=false.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 404 Not Found: Unknown event or user
    """
    user_id = UUID(current_user["user_id"])

    use_case = PerformEventSecurityCheckUseCase(uow_factory, audit_log)
    result = await use_case.execute(user_id, event_id)

    if result.is_err():
        error = result.error
        if error.code in NOT_FOUND_CODES:
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
