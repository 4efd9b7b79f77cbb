"""
Fraud API Routes

Admin endpoints for the fraud detector.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.error import ClientError, ServerError
from src.api.utils.admin_auth import require_admin
from src.app.services.audit_log_service import AuditLogService
from src.app.services.unit_of_work import UnitOfWork, UnitOfWorkFactory
from src.app.use_cases.fraud import (
    AnomalyReport,
    ComprehensiveFraudReport,
    DetectAnomaliesUseCase,
    DetectIPBasedFraudUseCase,
    DetectSuspiciousUserActivityUseCase,
    IPFraudReport,
    RunComprehensiveFraudCheckUseCase,
    SuspiciousActivityReport,
)
from src.depends import get_audit_log, get_unit_of_work, get_unit_of_work_factory

router = APIRouter(prefix="/fraud", tags=["Fraud"], dependencies=[Depends(require_admin)])


@router.get(
    "/users/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=SuspiciousActivityReport,
)
async def get_user_activity_risk(
    user_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    """
    Score one account from its last 24 hours of activity.

    Raises:
        - 403 Forbidden: Caller is not an admin
        - 404 Not Found: Unknown user
    """
    result = await DetectSuspiciousUserActivityUseCase(uow, audit_log).execute(user_id)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get("/ip", status_code=status.HTTP_200_OK, response_model=IPFraudReport)
async def get_ip_fraud(
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    """Source IPs with too many failures or too many distinct accounts."""
    result = await DetectIPBasedFraudUseCase(uow, audit_log).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get("/anomalies", status_code=status.HTTP_200_OK, response_model=AnomalyReport)
async def get_anomalies(
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    """Accounts deviating from the population baseline."""
    result = await DetectAnomaliesUseCase(uow, audit_log).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get(
    "/users/{user_id}/comprehensive",
    status_code=status.HTTP_200_OK,
    response_model=ComprehensiveFraudReport,
)
async def get_comprehensive_fraud_check(
    user_id: UUID,
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    """
    Run the user, IP and anomaly checks together.

    A check that fails or times out leaves its label null and is listed
    under failures; the others still report.

    Raises:
        - 403 Forbidden: Caller is not an admin
        - 404 Not Found: Unknown user
    """
    result = await RunComprehensiveFraudCheckUseCase(uow_factory, audit_log).execute(user_id)

    if result.is_err():
        error = result.error
        if error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
