"""Unit tests for password hashing and share tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from cher_closet.core.config import Settings
from cher_closet.core.security import SHARE_TOKEN_TYPE, Security


@pytest.fixture
def expiring_security(settings: Settings) -> Security:
    return Security(
        settings.model_copy(update={"share_link_expiration_days": 7}), bcrypt_rounds=4
    )


class TestPasswords:
    """Test bcrypt password handling."""

    def test_hash_and_verify(self, security: Security) -> None:
        """Test that a hash verifies only its own password."""
        hashed = security.hash_password("as-if-password")

        assert hashed != "as-if-password"
        assert hashed.startswith("$2b$04$")
        assert security.verify_password("as-if-password", hashed)
        assert not security.verify_password("whatever", hashed)

    def test_hashes_are_salted(self, security: Security) -> None:
        """Test that hashing twice gives different hashes."""
        assert security.hash_password("as-if-password") != security.hash_password(
            "as-if-password"
        )

    def test_short_password_is_rejected(self, security: Security) -> None:
        with pytest.raises(ValueError, match="at least 8 characters"):
            security.hash_password("short")

    def test_malformed_hash_does_not_verify(self, security: Security) -> None:
        """Test that a stored value that is not bcrypt is a mismatch."""
        assert security.verify_password("as-if-password", "plaintext") is False


class TestShareTokens:
    """Test outfit share token signing."""

    def test_round_trip(self, security: Security) -> None:
        """Test that a token decodes to its outfit."""
        payload = security.decode_share_token(security.create_share_token(42))

        assert payload is not None
        assert payload.outfit_id == 42
        assert payload.expires_at is None
        assert payload.jti

    def test_tokens_are_unique(self, security: Security) -> None:
        """Test that sharing the same outfit twice gives distinct links."""
        assert security.create_share_token(1) != security.create_share_token(1)

    def test_expiring_token(self, expiring_security: Security) -> None:
        """Test that the configured lifetime is applied."""
        payload = expiring_security.decode_share_token(
            expiring_security.create_share_token(3)
        )

        assert payload.expires_at is not None
        assert payload.expires_at - payload.issued_at == timedelta(days=7)

    def test_expired_token(self, settings: Settings, security: Security) -> None:
        """Test that an expired token is refused."""
        past = datetime.now(timezone.utc) - timedelta(days=1)
        token = jwt.encode(
            {"sub": "3", "iat": past - timedelta(days=1), "exp": past, "type": SHARE_TOKEN_TYPE},
            settings.jwt_secret,
            algorithm="HS256",
        )

        assert security.decode_share_token(token) is None

    def test_forged_token(self, security: Security) -> None:
        """Test that a token signed with another secret is refused."""
        token = jwt.encode(
            {"sub": "3", "type": SHARE_TOKEN_TYPE},
            "some-other-secret-that-is-long-enough",
            algorithm="HS256",
        )

        assert security.decode_share_token(token) is None

    def test_wrong_token_type(self, settings: Settings, security: Security) -> None:
        """Test that other JWTs cannot be used as share links."""
        token = jwt.encode({"sub": "3", "type": "access"}, settings.jwt_secret, algorithm="HS256")

        assert security.decode_share_token(token) is None

    @pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
    def test_malformed_token(self, security: Security, token: str) -> None:
        assert security.decode_share_token(token) is None
