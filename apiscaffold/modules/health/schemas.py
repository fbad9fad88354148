"""Health check response schema."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from apiscaffold.core.schema import ApiModel


class MemoryUsage(ApiModel):
    used: int = Field(ge=0, description="Resident memory of this process (MB)")
    total: int = Field(gt=0, description="Total physical memory of the host (MB)")


class HealthCheckResponse(ApiModel):
    status: Literal["ok", "error"] = Field(description="Overall service status")
    timestamp: datetime = Field(description="Server time (UTC, RFC 3339)")
    version: str = Field(description="Application version")
    uptime: float = Field(gt=0, description="Seconds since the process started")
    memory: MemoryUsage
