# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Central error handling.

Every failure, whether raised synchronously by a handler, raised from an
awaited coroutine, or produced by FastAPI itself, ends up in
``handle_error``. The exception is converted once into a tagged ``Failure``
and the rest of the pipeline dispatches on its ``kind``:

* ``api``: an ``ApiError`` or a Starlette ``HTTPException``; rendered with
  its own status, message, code and details.
* ``validation``: request or model validation errors; 400 with the field
  errors nested by location.
* ``unclassified``: anything else; 500, with the message hidden in
  production.

Responses always use the envelope ``{"error": {"message", "code", "details"?}}``.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from http import HTTPStatus
from typing import Any

from attrs import field, frozen
from beartype import beartype
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from ..core.config import Settings, get_settings
from ..core.errors import ApiError, ErrorKind

logger = logging.getLogger(__name__)

REDACTED_MESSAGE = "An unexpected error occurred"
VALIDATION_MESSAGE = "Validation error"

RouteHandler = Callable[[Request], Awaitable[Response] | Response]


@frozen
class Failure:
    """An exception reduced to what the client will see."""

    kind: ErrorKind = field()
    status_code: int = field()
    message: str = field()
    code: str = field()
    details: Any = field(default=None)
    headers: Mapping[str, str] | None = field(default=None)

    def envelope(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return {"error": body}


@beartype
def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Nest validation messages by location.

    ``[{"loc": ("body", "name"), "msg": "Field required"}]`` becomes
    ``{"_errors": [], "body": {"_errors": [], "name": {"_errors": ["Field required"]}}}``.
    """
    formatted: dict[str, Any] = {"_errors": []}
    for error in errors:
        node = formatted
        for part in error.get("loc", ()):
            node = node.setdefault(str(part), {"_errors": []})
        node["_errors"].append(str(error.get("msg", "Invalid value")))
    return formatted


def _http_code(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).name
    except ValueError:
        return f"ERROR_{status_code}"


@beartype
def to_failure(exc: BaseException, *, production: bool = False) -> Failure:
    """Classify an exception. This is the only place that inspects its type."""
    if isinstance(exc, ApiError):
        return Failure(
            kind=exc.kind,
            status_code=exc.status_code,
            message=exc.message,
            code=exc.code,
            details=exc.details,
        )
    if isinstance(exc, StarletteHTTPException):
        return Failure(
            kind=ErrorKind.API,
            status_code=exc.status_code,
            message=str(exc.detail),
            code=_http_code(exc.status_code),
            headers=exc.headers,
        )
    if isinstance(exc, (RequestValidationError, ValidationError)):
        return Failure(
            kind=ErrorKind.VALIDATION,
            status_code=400,
            message=VALIDATION_MESSAGE,
            code="VALIDATION_ERROR",
            details=format_validation_errors(exc.errors()),
        )
    return Failure(
        kind=ErrorKind.UNCLASSIFIED,
        status_code=500,
        message=REDACTED_MESSAGE if production else (str(exc) or type(exc).__name__),
        code="INTERNAL_SERVER_ERROR",
    )


def _settings_for(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    return settings if isinstance(settings, Settings) else get_settings()


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure and render the standard error envelope."""
    failure = to_failure(exc, production=_settings_for(request).is_production)
    context = f"path={request.url.path} method={request.method}"

    if failure.kind is ErrorKind.API:
        if failure.status_code >= 500:
            logger.error(f"Server error: {failure.message} [{failure.code}] {context}")
        else:
            logger.warning(f"Client error: {failure.message} [{failure.code}] {context}")
    elif failure.kind is ErrorKind.VALIDATION:
        logger.warning(f"Validation error: {failure.details} {context}")
    else:
        logger.error(f"Unhandled error: {exc} {context}", exc_info=exc)

    return JSONResponse(
        status_code=failure.status_code,
        content=failure.envelope(),
        headers=dict(failure.headers) if failure.headers else None,
    )


@beartype
def wrap_handler(handler: RouteHandler) -> Callable[[Request], Awaitable[Response]]:
    """Route a handler's synchronous raises and async failures to ``handle_error``."""

    async def funnel(request: Request) -> Response:
        try:
            result = handler(request)
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as e:
            return await handle_error(request, e)

    return funnel


class ErrorFunnelRoute(APIRoute):
    """APIRoute whose handler always goes through the error funnel."""

    def get_route_handler(self) -> Callable[[Request], Awaitable[Response]]:
        return wrap_handler(super().get_route_handler())


@beartype
def register_error_handlers(app: FastAPI) -> None:
    """Send failures raised outside funnelled routes to the same handler.

    Starlette runs the ``Exception`` handler from ``ServerErrorMiddleware``,
    which re-raises after the envelope has been sent. A failure raised in
    middleware is therefore answered with the envelope and also logged a
    second time by the server. Route failures never get that far.
    """
    app.add_exception_handler(StarletteHTTPException, handle_error)
    app.add_exception_handler(RequestValidationError, handle_error)
    app.add_exception_handler(ApiError, handle_error)
    app.add_exception_handler(Exception, handle_error)
