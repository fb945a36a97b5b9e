# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Health check response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HealthModel(BaseModel):
    """Base for health payloads, serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PoolStatusSchema(HealthModel):
    """Connection pool occupancy."""

    total_count: int = Field(..., ge=0, description="Connections held by the pool")
    idle_count: int = Field(..., ge=0, description="Connections not checked out")
    waiting_count: int = Field(..., ge=0, description="Callers waiting for a connection")


class DatabaseHealth(HealthModel):
    """Database section of the full health report."""

    status: str = Field(..., pattern="^(connected|disconnected)$")
    pool: PoolStatusSchema | None = None
    tables: list[str] | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


class MemoryUsage(HealthModel):
    """Process memory usage."""

    rss: str = Field(..., description="Resident set size, e.g. '85MB'")
    vms: str = Field(..., description="Virtual memory size, e.g. '410MB'")
    percent: float = Field(..., ge=0, le=100, description="Share of system memory")


class HealthResponse(HealthModel):
    """Full system health report."""

    status: str = Field(..., pattern="^(OK|ERROR)$")
    timestamp: datetime
    environment: str
    platform: str
    database: DatabaseHealth
    memory: MemoryUsage
    uptime: str = Field(..., description="Seconds since process start, e.g. '42s'")


class HealthFailureResponse(HealthModel):
    """Returned when the health report itself could not be assembled."""

    status: str = Field(default="ERROR")
    timestamp: datetime
    message: str
    error: str


class LivenessResponse(HealthModel):
    """Database-independent liveness answer."""

    status: str = Field(default="ok")
    timestamp: datetime
    environment: str
