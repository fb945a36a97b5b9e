"""Health check endpoints for monitoring system status.

``/health`` verifies the database (connectivity, schema and pool occupancy)
and reports process memory and uptime. ``/health/simple`` never touches the
database and is meant for liveness probes.
"""

import logging
import time
from datetime import datetime, timezone

import psutil
from beartype import beartype
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...core.config import Settings
from ...core.database import ConnectionPoolManager
from ...core.health import HealthReport, HealthVerifier
from ...schemas.health import (
    DatabaseHealth,
    HealthFailureResponse,
    HealthResponse,
    LivenessResponse,
    MemoryUsage,
    PoolStatusSchema,
)
from ..dependencies import get_app_settings, get_health_verifier, get_pool_manager
from ..error_handling import ErrorFunnelRoute

logger = logging.getLogger(__name__)

router = APIRouter(route_class=ErrorFunnelRoute)

# Track application start time
APP_START_MONOTONIC = time.monotonic()


def _megabytes(value: int) -> str:
    return f"{round(value / 1024 / 1024)}MB"


@beartype
def memory_snapshot() -> MemoryUsage:
    """Memory usage of the current process."""
    process = psutil.Process()
    info = process.memory_info()
    return MemoryUsage(
        rss=_megabytes(info.rss),
        vms=_megabytes(info.vms),
        percent=round(process.memory_percent(), 2),
    )


@beartype
def database_section(
    report: HealthReport, pool_manager: ConnectionPoolManager
) -> DatabaseHealth:
    """Project a health report onto the response's database section."""
    details = report.details
    if report.healthy:
        status = (details.pool_status if details else None) or pool_manager.get_pool_status()
        return DatabaseHealth(
            status="connected",
            pool=PoolStatusSchema(
                total_count=status.total_count,
                idle_count=status.idle_count,
                waiting_count=status.waiting_count,
            ),
            tables=details.tables if details else None,
        )

    extra: dict[str, object] | None = None
    if details is not None:
        if details.missing_tables is not None:
            extra = {"missingTables": details.missing_tables}
        elif details.error is not None:
            extra = {"error": details.error}
    return DatabaseHealth(status="disconnected", message=report.message, details=extra)


@router.get("/health", response_model=HealthResponse)
@beartype
async def health_check(
    settings: Settings = Depends(get_app_settings),
    verifier: HealthVerifier = Depends(get_health_verifier),
    pool_manager: ConnectionPoolManager = Depends(get_pool_manager),
) -> JSONResponse:
    """Full health report; 200 when the database is verified, 500 otherwise."""
    now = datetime.now(timezone.utc)
    try:
        report = await verifier.verify_health()
        response = HealthResponse(
            status="OK" if report.healthy else "ERROR",
            timestamp=now,
            environment=settings.app_env,
            platform=settings.platform_label,
            database=database_section(report, pool_manager),
            memory=memory_snapshot(),
            uptime=f"{int(time.monotonic() - APP_START_MONOTONIC)}s",
        )
        status_code = 200 if report.healthy else 500
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        response = HealthFailureResponse(
            timestamp=now,
            message="Failed to check system health",
            error=str(e),
        )
        status_code = 500

    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@router.get("/health/simple")
@beartype
async def simple_health(
    settings: Settings = Depends(get_app_settings),
) -> LivenessResponse:
    """Liveness probe that does not depend on the database."""
    return LivenessResponse(
        timestamp=datetime.now(timezone.utc), environment=settings.app_env
    )
