# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Typed errors shared by the API layer and the database layer.

``ApiError`` is the only exception type route handlers should raise to
produce a client-visible failure. It carries the HTTP status, an error code
and optional structured details, which the central error handler renders
into the standard error envelope. Anything else that escapes a handler is
treated as unclassified and answered with a 500.
"""

from enum import Enum
from typing import Any

from beartype import beartype


class ErrorKind(str, Enum):
    """Discriminator for the error handler's classification."""

    API = "api"
    VALIDATION = "validation"
    UNCLASSIFIED = "unclassified"


class ApiError(Exception):
    """Structured, client-visible API error.

    Factories leave ``error_code`` unset unless the caller names one, so the
    wire code falls back to ``ERROR_<status>``.
    """

    kind = ErrorKind.API

    @beartype
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details

    @property
    def code(self) -> str:
        """Error code, falling back to ``ERROR_<status>``."""
        return self.error_code or f"ERROR_{self.status_code}"

    def __repr__(self) -> str:
        return f"ApiError({self.status_code}, {self.code!r}, {self.message!r})"

    @classmethod
    def bad_request(
        cls, message: str, error_code: str | None = None, details: Any = None
    ) -> "ApiError":
        return cls(message, 400, error_code, details)

    @classmethod
    def unauthorized(
        cls,
        message: str = "Unauthorized",
        error_code: str | None = None,
        details: Any = None,
    ) -> "ApiError":
        return cls(message, 401, error_code, details)

    @classmethod
    def forbidden(
        cls,
        message: str = "Forbidden",
        error_code: str | None = None,
        details: Any = None,
    ) -> "ApiError":
        return cls(message, 403, error_code, details)

    @classmethod
    def not_found(
        cls,
        message: str = "Resource not found",
        error_code: str | None = None,
        details: Any = None,
    ) -> "ApiError":
        return cls(message, 404, error_code, details)

    @classmethod
    def conflict(
        cls, message: str, error_code: str | None = None, details: Any = None
    ) -> "ApiError":
        return cls(message, 409, error_code, details)

    @classmethod
    def validation(
        cls, message: str, error_code: str | None = None, details: Any = None
    ) -> "ApiError":
        return cls(message, 422, error_code, details)

    @classmethod
    def internal(
        cls,
        message: str = "Internal server error",
        error_code: str | None = None,
        details: Any = None,
    ) -> "ApiError":
        return cls(message, 500, error_code, details)


class ConfigurationError(Exception):
    """Required configuration is missing or inconsistent."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = missing or []


class DatabasePoolError(Exception):
    """Base class for connection pool errors."""


class PoolNotInitializedError(DatabasePoolError):
    """The pool was used before ``initialize()``."""


class ConnectionTimeoutError(DatabasePoolError):
    """No pooled connection became available within the configured timeout."""
