"""
Authentication and authorization.

1. TokenService issues signed tokens and verifies them against the
   owner's active set
2. CredentialStore keeps users, password hashes, and active tokens
3. require_auth resolves the x-auth header into an AuthContext
"""

from todo_api.auth.context import AuthContext
from todo_api.auth.credentials import CredentialStore, normalize_email
from todo_api.auth.jwt import (
    TokenClaims,
    TokenService,
    hash_password,
    verify_password,
)
from todo_api.auth.policies import AUTH_HEADER, require_auth
from todo_api.auth.routes import router as users_router

__all__ = [
    # Main interface
    "require_auth",
    "AuthContext",
    "AUTH_HEADER",
    # Services
    "CredentialStore",
    "TokenService",
    "TokenClaims",
    "normalize_email",
    "hash_password",
    "verify_password",
    # Router
    "users_router",
]
