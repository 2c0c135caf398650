"""
QnA Backend — Health Check Route
==================================

What:  Health check endpoint for monitoring and load balancer health checks.
How:   Checks the database with SELECT 1 and asks the censor client whether
       it is configured. No request is sent to the profanity API.

Status levels:
    - healthy:   database reachable, censor configured
    - degraded:  database reachable, censor unconfigured (writes will fail)
    - unhealthy: database unreachable
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text

from qna import __version__
from qna.database import engine
from qna.dependencies import get_censor
from qna.schemas.common import HealthResponse
from qna.services.censor_base import TextCensor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(censor: TextCensor = Depends(get_censor)) -> HealthResponse:
    """
    Check the health of the service and its dependencies.

    Returns:
        HealthResponse with status for each dependency and uptime.
    """
    db_status = "connected"
    censor_status = "configured"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check Censor API client ───────────────────────────────────────────
    if not await censor.health_check():
        censor_status = "unconfigured"
        overall = "degraded" if overall != "unhealthy" else overall

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        censor=censor_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
