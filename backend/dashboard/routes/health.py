"""
Dashboard Aggregator — Health Check Route
===========================================

What:  GET /health for container probes; exempt from the auth gate.
Why:   The dashboard holds no state of its own, so "healthy" means the
       process is serving. Backends are listed but deliberately not probed:
       their outages already show up as error slots in the overview.
"""

import time

from fastapi import APIRouter, Request

from dashboard import __version__
from dashboard.schemas.responses import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(request: Request) -> HealthResponse:
    backends = request.app.state.backends
    return HealthResponse(
        status="healthy",
        version=__version__,
        backends={key: backend.base_url for key, backend in backends.items()},
        uptime_seconds=round(time.time() - _start_time, 2),
    )
