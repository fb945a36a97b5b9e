# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Security utilities for password hashing and outfit share tokens."""

import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from attrs import field, frozen
from beartype import beartype

from .config import Settings

SHARE_TOKEN_TYPE = "outfit_share"


@frozen
class SharePayload:
    """Immutable decoded share token."""

    outfit_id: int = field()
    issued_at: datetime = field()
    jti: str = field()
    expires_at: datetime | None = field(default=None)


class Security:
    """Password hashing and share-link signing."""

    @beartype
    def __init__(self, settings: Settings, *, bcrypt_rounds: int = 12) -> None:
        """Initialize security utilities."""
        self._jwt_secret = settings.jwt_secret
        self._jwt_algorithm = settings.jwt_algorithm
        self._share_expiration_days = settings.share_link_expiration_days
        self._bcrypt_rounds = bcrypt_rounds

    @beartype
    def hash_password(self, password: str) -> str:
        """Hash password using bcrypt."""
        if len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        salt = bcrypt.gensalt(rounds=self._bcrypt_rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return str(hashed.decode("utf-8"))

    @beartype
    def verify_password(self, password: str, hashed_password: str) -> bool:
        """Verify password against hash."""
        try:
            return bool(
                bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
            )
        except ValueError:
            # Stored value is not a bcrypt hash
            return False

    @beartype
    def create_share_token(self, outfit_id: int) -> str:
        """Sign a token that grants read access to one outfit."""
        now = datetime.now(timezone.utc)
        payload: dict[str, object] = {
            "sub": str(outfit_id),
            "iat": now,
            "jti": str(uuid.uuid4()),
            "type": SHARE_TOKEN_TYPE,
        }
        if self._share_expiration_days is not None:
            payload["exp"] = now + timedelta(days=self._share_expiration_days)

        return jwt.encode(payload, self._jwt_secret, algorithm=self._jwt_algorithm)

    @beartype
    def decode_share_token(self, token: str) -> SharePayload | None:
        """Decode a share token; ``None`` when it is forged, expired or malformed."""
        try:
            payload = jwt.decode(
                token,
                self._jwt_secret,
                algorithms=[self._jwt_algorithm],
            )
        except jwt.InvalidTokenError:
            return None

        if payload.get("type") != SHARE_TOKEN_TYPE:
            return None
        try:
            outfit_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return None

        expires = payload.get("exp")
        return SharePayload(
            outfit_id=outfit_id,
            issued_at=datetime.fromtimestamp(payload.get("iat", 0), tz=timezone.utc),
            jti=str(payload.get("jti", "")),
            expires_at=(
                datetime.fromtimestamp(expires, tz=timezone.utc)
                if expires is not None
                else None
            ),
        )
