# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""FastAPI dependencies for authorization and shared application services.

The authorization gates are composable dependencies. Each one either returns
the caller's ``AuthenticatedIdentity`` or raises an ``ApiError`` that the
central error handler turns into the standard envelope. Every denial is
logged as a warning with the request context.

Services live on ``app.state`` and are set up by the application lifespan;
the ``get_*`` providers below expose them to endpoints.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from beartype import beartype
from fastapi import Request

from ..core.config import Settings
from ..core.database import ConnectionPoolManager
from ..core.errors import ApiError
from ..core.health import HealthVerifier
from ..core.security import Security
from ..models.user import UserRole
from ..schemas.auth import AuthenticatedIdentity
from ..services.ai_service import AIStylist
from ..services.storage import Storage
from ..services.weather import WeatherClient

logger = logging.getLogger(__name__)

LOGIN_REQUIRED_MESSAGE = "You must be logged in to access this resource"
PERMISSION_DENIED_MESSAGE = "You do not have permission to access this resource"

SESSION_USER_KEY = "user"

Gate = Callable[[Request], Awaitable[AuthenticatedIdentity]]
OwnerIdExtractor = Callable[[Request], int]


# Identity


@beartype
def get_identity(request: Request) -> AuthenticatedIdentity | None:
    """Read the caller's identity from the session, if there is one."""
    session = request.scope.get("session") or {}
    data = session.get(SESSION_USER_KEY)
    if not isinstance(data, dict):
        return None
    user_id = data.get("id")
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id < 1:
        return None
    return AuthenticatedIdentity(id=user_id, role=UserRole.parse(data.get("role")))


@beartype
def remember_identity(request: Request, user_id: int, role: UserRole) -> None:
    """Store the logged-in user in the session."""
    request.session[SESSION_USER_KEY] = {"id": user_id, "role": role.value}


@beartype
def forget_identity(request: Request) -> None:
    request.session.clear()


def _request_context(request: Request) -> str:
    client = request.client.host if request.client else "unknown"
    return f"path={request.url.path} method={request.method} ip={client}"


# Authorization gates


@beartype
async def require_authenticated(request: Request) -> AuthenticatedIdentity:
    """Allow only callers with an established identity."""
    identity = get_identity(request)
    if identity is None:
        logger.warning(f"Unauthorized access attempt: {_request_context(request)}")
        raise ApiError.unauthorized(LOGIN_REQUIRED_MESSAGE)
    return identity


@beartype
def require_role(role_or_roles: UserRole | str | Iterable[UserRole | str]) -> Gate:
    """Build a gate that admits callers holding any of the given roles."""
    if isinstance(role_or_roles, (UserRole, str)):
        role_or_roles = [role_or_roles]
    allowed = frozenset(UserRole(role) for role in role_or_roles)
    if not allowed:
        raise ValueError("require_role needs at least one role")

    async def role_gate(request: Request) -> AuthenticatedIdentity:
        identity = await require_authenticated(request)
        if identity.role not in allowed:
            logger.warning(
                f"Forbidden access attempt: {_request_context(request)} "
                f"user_id={identity.id} user_role={identity.role.value} "
                f"required_roles={sorted(role.value for role in allowed)}"
            )
            raise ApiError.forbidden(PERMISSION_DENIED_MESSAGE)
        return identity

    return role_gate


@beartype
def path_param_owner(name: str = "user_id") -> OwnerIdExtractor:
    """Extractor reading the resource owner's id from a path parameter."""

    def extract(request: Request) -> int:
        return int(request.path_params[name])

    return extract


@beartype
def require_self_or_admin(
    owner_id_extractor: OwnerIdExtractor | None = None,
) -> Gate:
    """Build a gate that admits the resource owner or an admin."""
    extractor = owner_id_extractor or path_param_owner()

    async def ownership_gate(request: Request) -> AuthenticatedIdentity:
        identity = await require_authenticated(request)
        try:
            owner_id = extractor(request)
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError.bad_request("Invalid resource owner id") from e

        if identity.id != owner_id and not identity.is_admin:
            logger.warning(
                f"Forbidden ownership access attempt: {_request_context(request)} "
                f"user_id={identity.id} user_role={identity.role.value} "
                f"resource_user_id={owner_id}"
            )
            raise ApiError.forbidden(PERMISSION_DENIED_MESSAGE)
        return identity

    return ownership_gate


@beartype
def ensure_owner(resource_user_id: int, identity: AuthenticatedIdentity) -> None:
    """Strict ownership check used inside resource handlers."""
    if resource_user_id != identity.id:
        raise ApiError.forbidden(PERMISSION_DENIED_MESSAGE)


# Application services


def _state(request: Request, name: str, label: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise ApiError(f"{label} is not initialized", 503, "SERVICE_UNAVAILABLE")
    return value


@beartype
def get_app_settings(request: Request) -> Settings:
    return _state(request, "settings", "Configuration")


@beartype
def get_pool_manager(request: Request) -> ConnectionPoolManager:
    return _state(request, "pool_manager", "Database")


@beartype
def get_health_verifier(request: Request) -> HealthVerifier:
    return _state(request, "health_verifier", "Health verifier")


@beartype
def get_storage(request: Request) -> Storage:
    return _state(request, "storage", "Storage")


@beartype
def get_security(request: Request) -> Security:
    return _state(request, "security", "Security")


@beartype
def get_weather_client(request: Request) -> WeatherClient:
    return _state(request, "weather_client", "Weather service")


@beartype
def get_ai_stylist(request: Request) -> AIStylist:
    return _state(request, "ai_stylist", "AI service")
