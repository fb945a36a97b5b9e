"""Common API schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class APIInfo(BaseModel):
    """API information response."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    name: str = Field(..., description="API name")
    version: str = Field(..., description="API version")
    status: str = Field(..., description="API status")
    environment: str = Field(..., description="Environment name")


class ErrorBody(BaseModel):
    """Inner object of the error envelope."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: str = Field(..., description="Human readable error message")
    code: str = Field(..., description="Machine readable error code")
    details: Any = Field(default=None, description="Structured error details")


class ErrorEnvelope(BaseModel):
    """Standard error response: ``{"error": {...}}``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error: ErrorBody
