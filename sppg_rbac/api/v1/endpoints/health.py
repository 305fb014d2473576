"""Health check endpoints for liveness and readiness probes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from sppg_rbac.api.v1.dependencies import get_uow_factory
from sppg_rbac.application.interfaces import UnitOfWorkFactory
from sppg_rbac.core.config import get_settings
from sppg_rbac.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Store unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check(
    uow_factory: Annotated[UnitOfWorkFactory, Depends(get_uow_factory)],
) -> ReadinessResponse | JSONResponse:
    """Return 200 when the RBAC store answers a read; 503 otherwise."""
    try:
        async with uow_factory(read_only=True) as uow:
            await uow.permissions.list_permissions(module="permission")
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(message=str(e)).model_dump(),
        )
    return ReadinessResponse()
