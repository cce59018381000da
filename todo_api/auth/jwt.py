# =============================================================================
# JWT Authentication Implementation
# =============================================================================
#
# This module provides:
#   - Password hashing (PBKDF2-SHA256, salted)
#   - Token issuance (signed JWT, one random jti per token)
#   - Token verification (signature first, then live membership in the
#     owner's active token set)
#
# =============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING
import hashlib
import logging
import secrets

from pydantic import BaseModel
import jwt

from todo_api.config import Settings
from todo_api.core.errors import ExpiredToken, InvalidToken, RevokedToken
from todo_api.core.models import TokenScope
from todo_api.core.utils import utc_now

if TYPE_CHECKING:
    from todo_api.auth.credentials import CredentialStore

logger = logging.getLogger(__name__)


# =============================================================================
# Password Hashing
# =============================================================================

def hash_password(password: str, iterations: int = 100_000) -> str:
    """
    Hash a password using PBKDF2-SHA256.

    Returns: iterations:salt:hash format string
    """
    salt = secrets.token_hex(16)
    hash_bytes = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        iterations=iterations,
    )
    return f"{iterations}:{salt}:{hash_bytes.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of a password against its hash."""
    try:
        iterations, salt, stored_hash = password_hash.split(':')
        hash_bytes = hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            iterations=int(iterations),
        )
        return secrets.compare_digest(hash_bytes.hex(), stored_hash)
    except (ValueError, AttributeError):
        return False


# =============================================================================
# Models
# =============================================================================

class TokenClaims(BaseModel):
    """Decoded token claims."""
    user_id: str
    scope: str
    jti: str
    token: str
    expires_at: datetime | None = None


# =============================================================================
# Token Service
# =============================================================================

class TokenService:
    """
    Issues and verifies auth tokens.

    Tokens are self-describing (signed), but a valid signature alone is
    not enough: ``verify`` also requires the token to still be in its
    owner's active set, so logout takes effect immediately.
    """

    def __init__(self, settings: Settings, credentials: CredentialStore):
        self.settings = settings
        self.credentials = credentials

    def issue(self, user_id: str, scope: str = TokenScope.AUTH.value) -> str:
        """Create a signed token for ``user_id``. Does not persist it."""
        now = utc_now()
        payload = {
            "sub": user_id,
            "access": scope,
            "iat": now,
            "jti": secrets.token_hex(16),
        }
        if self.settings.token_expire_minutes > 0:
            payload["exp"] = now + timedelta(minutes=self.settings.token_expire_minutes)

        return jwt.encode(
            payload,
            self.settings.jwt_secret_key,
            algorithm=self.settings.jwt_algorithm,
        )

    def decode(self, token: str) -> TokenClaims:
        """
        Check a token's signature and shape.

        Raises:
            ExpiredToken: Token carries an ``exp`` in the past
            InvalidToken: Token is malformed, tampered, or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret_key,
                algorithms=[self.settings.jwt_algorithm],
                options={"require": ["sub", "access", "jti"]},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredToken("Token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidToken(f"Invalid token: {e}")

        exp = payload.get("exp")
        return TokenClaims(
            user_id=payload["sub"],
            scope=payload["access"],
            jti=payload["jti"],
            token=token,
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        )

    async def verify(self, token: str) -> TokenClaims:
        """
        Decode a token and confirm it is still active.

        Raises:
            InvalidToken, ExpiredToken: see ``decode``
            RevokedToken: Token is not in the user's active set
        """
        claims = self.decode(token)
        user = await self.credentials.find_by_token(claims.user_id, token, claims.scope)
        if user is None:
            raise RevokedToken("Token is no longer active")
        return claims
