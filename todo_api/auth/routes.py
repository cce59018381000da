# =============================================================================
# User API Routes
# =============================================================================
#
# Endpoints:
#   POST   /users              - Create account, returns x-auth header
#   POST   /users/login        - New session token in x-auth header
#   GET    /users/me           - Current user
#   DELETE /users/me/token     - Logout (revoke the token in use)
#   POST   /users/me/password  - Change password, revokes every token
#
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from todo_api.auth.context import AuthContext
from todo_api.auth.credentials import CredentialStore
from todo_api.auth.jwt import TokenService
from todo_api.auth.policies import (
    AUTH_HEADER,
    get_credential_store,
    get_token_service,
    require_auth,
)
from todo_api.core.models import UserInDB, UserResponse, Utf8Str

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


# =============================================================================
# Request Models
# =============================================================================

class UserCreate(BaseModel):
    # Format and length are checked by CredentialStore so every caller
    # gets the same rules.
    email: Utf8Str
    password: Utf8Str


class LoginRequest(BaseModel):
    email: Utf8Str
    password: Utf8Str


class ChangePasswordRequest(BaseModel):
    current_password: Utf8Str
    new_password: Utf8Str


async def _start_session(
    user: UserInDB,
    response: Response,
    tokens: TokenService,
    credentials: CredentialStore,
) -> None:
    token = tokens.issue(user.id)
    await credentials.add_token(user.id, token)
    response.headers[AUTH_HEADER] = token


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("", response_model=UserResponse)
async def register(
    data: UserCreate,
    response: Response,
    tokens: TokenService = Depends(get_token_service),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Create a new account.

    The first session token is returned in the x-auth header.
    """
    user = await credentials.create_user(data.email, data.password)
    await _start_session(user, response, tokens, credentials)
    return UserResponse.from_user(user)


@router.post("/login", response_model=UserResponse)
async def login(
    data: LoginRequest,
    response: Response,
    tokens: TokenService = Depends(get_token_service),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Authenticate and add a new session token.

    Existing tokens stay valid; each login is its own session.
    """
    user = await credentials.authenticate(data.email, data.password)
    await _start_session(user, response, tokens, credentials)
    logger.info("Login: %s", user.id)
    return UserResponse.from_user(user)


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.get("/me", response_model=UserResponse)
async def get_current_user(ctx: AuthContext = Depends(require_auth)):
    """Get the current authenticated user."""
    return UserResponse(id=ctx.user_id, email=ctx.user_email)


@router.delete("/me/token")
async def logout(
    ctx: AuthContext = Depends(require_auth),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """Revoke the token used for this request."""
    await credentials.remove_token(ctx.user_id, ctx.token)
    logger.info("Logout: %s", ctx.user_id)
    return Response(status_code=200)


@router.post("/me/password", response_model=UserResponse)
async def change_password(
    data: ChangePasswordRequest,
    response: Response,
    ctx: AuthContext = Depends(require_auth),
    tokens: TokenService = Depends(get_token_service),
    credentials: CredentialStore = Depends(get_credential_store),
):
    """
    Change password.

    Every existing session is revoked; a fresh token is returned in the
    x-auth header.
    """
    user = await credentials.change_password(
        ctx.user_id, data.current_password, data.new_password
    )
    await _start_session(user, response, tokens, credentials)
    return UserResponse.from_user(user)
