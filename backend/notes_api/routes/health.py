"""
Notes API: Health Check Route
==============================

What:  Reports whether the service can reach its database.
Who:   Docker health checks, load balancers, monitoring.

Status levels:
    - healthy:   database answered SELECT 1 (HTTP 200)
    - unhealthy: no database configured or it did not answer (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response, status

from notes_api import __version__
from notes_api.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    database = request.app.state.database
    db_ok = await database.ping()
    if not db_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        version=__version__,
        database="connected" if db_ok else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
