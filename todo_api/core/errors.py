"""
Error taxonomy.

Every domain failure is one of four kinds, each mapped to an HTTP
status by ``todo_api.api.errors``:

- ValidationError / ConflictError -> 400
- AuthError -> 401 (always with an empty body)
- NotFoundError -> 404 (also used for resources owned by someone else)
"""

from __future__ import annotations


class TodoApiError(Exception):
    """Base exception for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__ or "")
        self.message = message or self.__class__.__doc__ or ""


# =============================================================================
# 400
# =============================================================================


class ValidationError(TodoApiError):
    """Request content failed validation."""
    status_code = 400


class InvalidCredentials(ValidationError):
    """Invalid email or password."""


class ConflictError(TodoApiError):
    """Resource conflicts with an existing one."""
    status_code = 400


class DuplicateEmail(ConflictError):
    """Email already registered."""


# =============================================================================
# 401
# =============================================================================


class AuthError(TodoApiError):
    """Authentication failed."""
    status_code = 401


class MissingToken(AuthError):
    """No auth token supplied."""


class InvalidToken(AuthError):
    """Token is malformed or its signature does not match."""


class ExpiredToken(AuthError):
    """Token has expired."""


class RevokedToken(AuthError):
    """Token is no longer active for its user."""


# =============================================================================
# 404
# =============================================================================


class NotFoundError(TodoApiError):
    """Resource not found."""
    status_code = 404


class TodoNotFound(NotFoundError):
    """Todo not found."""


class UserNotFound(NotFoundError):
    """User not found."""
