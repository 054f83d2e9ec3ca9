"""Health check endpoints for monitoring service status."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response

from biocatalog.database.core import DatabaseService
from biocatalog.system.structlog_configurator import get_package_version
from biocatalog.web.core.container import Container
from biocatalog.web.models.health import HealthCheckResponse, ReadinessProbeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health")


def _now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@router.get("", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Check basic health status of the service.

    Returns:
        Health status with timestamp and version.
    """
    return HealthCheckResponse(
        status="healthy",
        timestamp=_now(),
        version=get_package_version(),
        service="biocatalog",
    )


@router.get("/ready", status_code=200, response_model=ReadinessProbeResponse)
@inject
async def readiness_probe(
    db_service: Annotated[DatabaseService, Depends(Provide[Container.database_service])],
    response: Response,
) -> ReadinessProbeResponse:
    """Check if service is ready to handle requests.

    Returns:
        Readiness status with component checks; 503 when the database does not answer.
    """
    checks = {
        "database": await db_service.check_connection(),
        "version": get_package_version(),
    }

    is_ready = bool(checks["database"])
    if not is_ready:
        response.status_code = 503

    return ReadinessProbeResponse(
        status="ready" if is_ready else "not_ready",
        checks=checks,
        timestamp=_now(),
    )
