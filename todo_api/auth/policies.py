"""
Policies - request authentication for route handlers.

Just use: `ctx: AuthContext = Depends(require_auth)`

Per request:
    Unauthenticated -> TokenExtracted -> TokenVerified -> UserResolved
and any step can short-circuit to Rejected, which always surfaces as a
401 with an empty body (see todo_api.api.errors).
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from todo_api.auth.context import AuthContext
from todo_api.auth.credentials import CredentialStore
from todo_api.auth.jwt import TokenService
from todo_api.core.errors import AuthError, MissingToken, RevokedToken, UserNotFound
from todo_api.integrations import sentry

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth"

# Doesn't fail on its own if the header is missing; require_auth decides
auth_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)


# =============================================================================
# Service lookups (set on app.state by create_app)
# =============================================================================


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.credentials


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


# =============================================================================
# The dependency
# =============================================================================


async def require_auth(
    token: str | None = Depends(auth_header),
    tokens: TokenService = Depends(get_token_service),
    credentials: CredentialStore = Depends(get_credential_store),
) -> AuthContext:
    """
    Resolve the caller from the ``x-auth`` header.

    Raises:
        AuthError: Missing, invalid, expired, or revoked token, or the
            token's user no longer exists
    """
    if not token:
        raise MissingToken()

    try:
        claims = await tokens.verify(token)
        user = await credentials.find_by_id(claims.user_id)
    except UserNotFound:
        raise RevokedToken("Token owner no longer exists")
    except AuthError as e:
        logger.debug("Rejected request: %s", type(e).__name__)
        raise

    sentry.set_user(user.id)
    return AuthContext(
        user_id=user.id,
        user_email=user.email,
        token=token,
        scope=claims.scope,
    )
