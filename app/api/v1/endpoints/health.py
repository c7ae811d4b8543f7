"""Health check endpoints for liveness and readiness probes."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.api.dependencies import FileServiceDep, SettingsDep
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(settings: SettingsDep) -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=settings.app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Datastore unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check(file_service: FileServiceDep) -> ReadinessResponse | JSONResponse:
    """Return 200 when the datastore answers a one-record read; 503 otherwise."""
    repo = file_service.file_repo
    try:
        await repo.first()
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(message=str(e) or type(e).__name__).model_dump(),
        )
    return ReadinessResponse(adapter=type(repo.adapter).__name__)
