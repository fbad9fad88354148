"""
API Scaffold — Health Check Routes
===================================

What:  GET /api/v1/health — status, version, uptime and memory usage.
Who:   Docker health checks, load balancers, monitoring.

Memory figures come from psutil: resident set size of this process and the
host's total physical memory, both in megabytes.
"""

import time
from datetime import datetime, timezone

import psutil

from apiscaffold import __version__
from apiscaffold.core.routes import RequestContext, Route, RouteSchema
from apiscaffold.modules.health.schemas import HealthCheckResponse

_MB = 1024 * 1024


async def health_check(ctx: RequestContext) -> dict:
    """Report liveness plus a few process metrics."""
    process = psutil.Process()
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc),
        "version": __version__,
        "uptime": time.time() - process.create_time(),
        "memory": {
            "used": round(process.memory_info().rss / _MB),
            "total": round(psutil.virtual_memory().total / _MB),
        },
    }


routes = [
    Route(
        method="GET",
        path="/",
        handler=health_check,
        schema=RouteSchema(response=HealthCheckResponse),
        summary="Health Check",
        description="Get application health status",
        tags=("Health",),
    ),
]
