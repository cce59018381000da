"""
Credential store - user records and their active tokens.

Backed by MetadataStorage. Email uniqueness is enforced by the storage
insert (unique field), never by a read-then-write check.
"""

from __future__ import annotations

import logging
import secrets

from pydantic import BaseModel, EmailStr, ValidationError as PydanticValidationError

from todo_api.auth.jwt import hash_password, verify_password
from todo_api.config import Settings
from todo_api.core.errors import (
    DuplicateEmail,
    InvalidCredentials,
    UserNotFound,
    ValidationError,
)
from todo_api.core.models import AuthToken, TokenScope, UserInDB
from todo_api.storage import Collections, DuplicateKeyError, StorageProvider

logger = logging.getLogger(__name__)


class _EmailCheck(BaseModel):
    email: EmailStr


def normalize_email(email: str) -> str:
    """Trim, lower-case, and validate an email address."""
    email = email.strip().lower()
    try:
        _EmailCheck(email=email)
    except PydanticValidationError:
        raise ValidationError(f"{email!r} is not a valid email")
    return email


class CredentialStore:
    """Persists users: email, password hash, and active tokens."""

    def __init__(self, storage: StorageProvider, settings: Settings):
        self.db = storage.metadata
        self.settings = settings
        # Checked on unknown emails so login costs the same either way
        self._dummy_hash = hash_password(
            secrets.token_hex(16), settings.password_hash_iterations
        )

    def _check_password(self, password: str) -> None:
        if len(password) < self.settings.password_min_length:
            raise ValidationError(
                f"Password must be at least {self.settings.password_min_length} characters"
            )

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def create_user(self, email: str, password: str) -> UserInDB:
        """
        Register a new user.

        Raises:
            ValidationError: Malformed email or password too short
            DuplicateEmail: Email already registered
        """
        email = normalize_email(email)
        self._check_password(password)

        user = UserInDB(
            email=email,
            password_hash=hash_password(password, self.settings.password_hash_iterations),
        )
        try:
            await self.db.insert(
                Collections.USERS, user.id, user.model_dump(), unique=("email",)
            )
        except DuplicateKeyError:
            raise DuplicateEmail("Email already registered")

        logger.info("Registered user %s", user.id)
        return user

    async def find_by_id(self, user_id: str) -> UserInDB:
        doc = await self.db.get(Collections.USERS, user_id)
        if doc is None:
            raise UserNotFound()
        return UserInDB.model_validate(doc)

    async def find_by_email(self, email: str) -> UserInDB:
        doc = await self.db.find_one(Collections.USERS, {"email": email.strip().lower()})
        if doc is None:
            raise UserNotFound()
        return UserInDB.model_validate(doc)

    async def find_by_token(
        self, user_id: str, token: str, scope: str = TokenScope.AUTH.value
    ) -> UserInDB | None:
        """The user owning ``token`` if it is still active, else None."""
        doc = await self.db.get(Collections.USERS, user_id)
        if doc is None:
            return None
        user = UserInDB.model_validate(doc)
        return user if user.has_token(token, scope) else None

    # -------------------------------------------------------------------------
    # Passwords
    # -------------------------------------------------------------------------

    def verify_password(self, user: UserInDB, candidate: str) -> bool:
        return verify_password(candidate, user.password_hash)

    async def authenticate(self, email: str, password: str) -> UserInDB:
        """
        Look up a user by credentials.

        Unknown email and wrong password raise the same error.
        """
        try:
            user = await self.find_by_email(email)
        except UserNotFound:
            verify_password(password, self._dummy_hash)
            raise InvalidCredentials()
        if not self.verify_password(user, password):
            raise InvalidCredentials()
        return user

    async def change_password(self, user_id: str, current: str, new: str) -> UserInDB:
        """Replace the password and revoke every active token."""
        user = await self.find_by_id(user_id)
        if not self.verify_password(user, current):
            raise InvalidCredentials()
        self._check_password(new)

        doc = await self.db.find_one_and_update(
            Collections.USERS,
            {"id": user_id},
            {
                "password_hash": hash_password(new, self.settings.password_hash_iterations),
                "tokens": [],
            },
        )
        if doc is None:
            raise UserNotFound()

        logger.info("Password changed for user %s; all tokens revoked", user_id)
        return UserInDB.model_validate(doc)

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    async def add_token(
        self, user_id: str, token: str, scope: str = TokenScope.AUTH.value
    ) -> None:
        item = AuthToken(access=scope, token=token).model_dump()
        if not await self.db.push(Collections.USERS, user_id, "tokens", item):
            raise UserNotFound()

    async def remove_token(self, user_id: str, token: str) -> None:
        """Remove a token. Removing one that is not there is a no-op."""
        await self.db.pull(Collections.USERS, user_id, "tokens", {"token": token})
