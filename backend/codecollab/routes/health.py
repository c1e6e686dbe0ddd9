"""
CodeCollab Backend — Health Check and Banner Routes
=====================================================

What:  GET /api/health liveness probe and the GET / banner.
Who:   Called by container health checks, load balancers, and humans poking the API.

Health semantics:
    The probe answers 200 whenever the process is serving requests. Database
    reachability is reported alongside: "healthy" when SELECT 1 succeeds,
    "degraded" otherwise.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text

from codecollab import __version__
from codecollab.database import engine
from codecollab.schemas.project import HealthResponse, RootResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Process start, for uptime reporting
_start_time = time.time()


@router.get(
    "/",
    response_model=RootResponse,
    summary="API banner",
)
async def root() -> RootResponse:
    return RootResponse(
        message="CodeCollab API Server is running!",
        endpoints={
            "projects": "/api/projects",
            "health": "/api/health",
        },
    )


@router.get(
    "/api/health",
    response_model=HealthResponse,
    summary="Service health check",
    description=(
        "Liveness probe. Always 200 while the process is up; reports database "
        "connectivity and uptime."
    ),
)
async def health_check() -> HealthResponse:
    """
    Probe the database with SELECT 1 and report aggregate status.

    Returns:
        HealthResponse with status, current timestamp, version, database
        connectivity and uptime.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "degraded"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
