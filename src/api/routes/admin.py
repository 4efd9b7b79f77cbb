"""
Admin API Routes

System health, dashboards and threat intelligence. Admin role required.
"""

from fastapi import APIRouter, Depends, status

from src.api.error import ServerError
from src.api.utils.admin_auth import require_admin
from src.app.services.audit_log_service import AuditLogService
from src.app.services.threat_intelligence import IThreatFeedClient
from src.app.services.unit_of_work import UnitOfWork, UnitOfWorkFactory
from src.app.use_cases.monitoring import (
    CollectThreatIntelligenceUseCase,
    GenerateSystemReportUseCase,
    GetSecurityDashboardUseCase,
    GetSystemHealthUseCase,
    GetThreatOverviewUseCase,
    SecurityDashboard,
    SystemHealth,
    SystemReport,
    ThreatIntelligenceReport,
    ThreatOverview,
)
from src.depends import (
    get_audit_log,
    get_threat_feed_client,
    get_unit_of_work,
    get_unit_of_work_factory,
)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/system-health", status_code=status.HTTP_200_OK, response_model=SystemHealth)
async def get_system_health(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Point-in-time CPU, memory, heap, database, disk and uptime snapshot.

    Raises:
        - 403 Forbidden: Caller is not an admin
        - 500 Internal Server Error: A probe failed
    """
    result = await GetSystemHealthUseCase(uow).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get("/system-report", status_code=status.HTTP_200_OK, response_model=SystemReport)
async def get_system_report(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
):
    """Health, 30-day security report and the last 100 API requests."""
    result = await GenerateSystemReportUseCase(uow_factory).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get(
    "/security-dashboard",
    status_code=status.HTTP_200_OK,
    response_model=SecurityDashboard,
)
async def get_security_dashboard(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    result = await GetSecurityDashboardUseCase(uow_factory, audit_log).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get("/threat-overview", status_code=status.HTTP_200_OK, response_model=ThreatOverview)
async def get_threat_overview(
    uow_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    audit_log: AuditLogService = Depends(get_audit_log),
):
    """IP fraud scan, anomaly scan and standing security recommendations."""
    result = await GetThreatOverviewUseCase(uow_factory, audit_log).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post(
    "/threat-intelligence",
    status_code=status.HTTP_200_OK,
    response_model=ThreatIntelligenceReport,
)
async def collect_threat_intelligence(
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit_log: AuditLogService = Depends(get_audit_log),
    feed_client: IThreatFeedClient = Depends(get_threat_feed_client),
):
    """
    Pull MISP, OTX and ThreatCrowd feeds and rank the threats.

    Unreachable feeds contribute nothing; the collection still succeeds.
    """
    use_case = CollectThreatIntelligenceUseCase(uow, audit_log, feed_client)
    result = await use_case.execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value
