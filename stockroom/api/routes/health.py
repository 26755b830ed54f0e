"""
Health check endpoints.
"""

import time

from fastapi import APIRouter, Request

from stockroom import __version__
from stockroom.application.dto.responses import HealthResponse, ProviderHealthResponse

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health(request: Request) -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and response time.
    """
    db_status = ProviderHealthResponse(
        name="sqlite",
        available=False,
    )

    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        db_status.error = "Connection pool is not initialized"
    else:
        try:
            start = time.time()
            async with pool.acquire() as conn:
                await conn.execute("SELECT 1")
            latency = (time.time() - start) * 1000

            db_status = ProviderHealthResponse(
                name="sqlite",
                available=True,
                latency_ms=latency,
            )

        except Exception as e:
            db_status.error = str(e)

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version=__version__,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
