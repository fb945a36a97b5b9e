# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Session login, registration and logout."""

import logging

import asyncpg
from beartype import beartype
from fastapi import APIRouter, Depends, Request, Response, status

from ...core.errors import ApiError
from ...core.security import Security
from ...models.user import User, UserCreate
from ...schemas.auth import AuthenticatedIdentity, LoginRequest, RegisterRequest
from ...services.storage import Storage
from ..dependencies import (
    forget_identity,
    get_security,
    get_storage,
    remember_identity,
    require_authenticated,
)
from ..error_handling import ErrorFunnelRoute

logger = logging.getLogger(__name__)

router = APIRouter(route_class=ErrorFunnelRoute)

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


@router.post("/register", status_code=status.HTTP_201_CREATED)
@beartype
async def register(
    request: Request,
    payload: RegisterRequest,
    storage: Storage = Depends(get_storage),
    security: Security = Depends(get_security),
) -> User:
    """Create an account and start a session for it."""
    if await storage.get_user_by_username(payload.username) is not None:
        raise ApiError.conflict("Username already exists")

    try:
        user = await storage.create_user(
            UserCreate(
                username=payload.username,
                password_hash=security.hash_password(payload.password),
                email=payload.email,
            )
        )
    except asyncpg.UniqueViolationError as e:
        raise ApiError.conflict("Username already exists") from e

    remember_identity(request, user.id, user.role)
    logger.info(f"Registered user {user.id}")
    return user


@router.post("/login")
@beartype
async def login(
    request: Request,
    payload: LoginRequest,
    storage: Storage = Depends(get_storage),
    security: Security = Depends(get_security),
) -> User:
    credentials = await storage.get_user_credentials(payload.username)
    if credentials is None:
        raise ApiError.unauthorized(INVALID_CREDENTIALS_MESSAGE)

    user, password_hash = credentials
    if not security.verify_password(payload.password, password_hash):
        raise ApiError.unauthorized(INVALID_CREDENTIALS_MESSAGE)

    remember_identity(request, user.id, user.role)
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
@beartype
async def logout(request: Request) -> Response:
    forget_identity(request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/user")
@beartype
async def current_user(
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    storage: Storage = Depends(get_storage),
) -> User:
    """The logged-in user's account."""
    user = await storage.get_user(identity.id)
    if user is None:
        raise ApiError.not_found("User not found")
    return user
