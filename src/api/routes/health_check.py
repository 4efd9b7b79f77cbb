from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.monitoring import ConnectionState, GetSystemHealthUseCase
from src.depends import get_unit_of_work

router = APIRouter()


@router.get("/health")
async def health_check(uow: UnitOfWork = Depends(get_unit_of_work)):
    """Liveness plus database probe; 503 when the database does not answer."""
    state = await GetSystemHealthUseCase(uow).database_state()

    if state == ConnectionState.CONNECTED:
        return {"status": "ok", "database": state.value}

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "degraded", "database": state.value},
    )
