"""
Core data models for the todo service.

Users own their list of active auth tokens; todos are bound to the user
that created them. Models are stored as plain dicts (``model_dump()``)
and serialized to clients using the field aliases below.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from todo_api.core.utils import generate_id, utc_now


# =============================================================================
# Request strings
# =============================================================================


def _require_utf8(value: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError("must be valid UTF-8 text")
    return value


# JSON escapes can decode to lone surrogates, which cannot be stored or sent back
Utf8Str = Annotated[str, AfterValidator(_require_utf8)]


# =============================================================================
# Enums
# =============================================================================


class TokenScope(str, Enum):
    """What a token authorizes."""

    AUTH = "auth"  # Full access to the owner's account and todos


# =============================================================================
# Users
# =============================================================================


class AuthToken(BaseModel):
    """An active session token held by a user."""

    access: str = TokenScope.AUTH.value
    token: str


class UserInDB(BaseModel):
    """User stored in the credential store."""

    id: str = Field(default_factory=generate_id)
    email: str
    password_hash: str
    tokens: list[AuthToken] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    def has_token(self, token: str, access: str = TokenScope.AUTH.value) -> bool:
        return any(t.token == token and t.access == access for t in self.tokens)


class UserResponse(BaseModel):
    """User data returned to client (no sensitive fields)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    email: str

    @classmethod
    def from_user(cls, user: UserInDB) -> UserResponse:
        return cls(id=user.id, email=user.email)


# =============================================================================
# Todos
# =============================================================================


class Todo(BaseModel):
    """
    A single todo item.

    ``completed_at`` is epoch milliseconds and is set iff ``completed``.
    ``owner_id`` never changes after creation.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_id, alias="_id")
    text: str
    completed: bool = False
    completed_at: int | None = Field(default=None, alias="completedAt")
    owner_id: str = Field(alias="_creator")
