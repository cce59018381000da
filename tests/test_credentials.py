"""
Tests for the credential store.
"""

import pytest

import todo_api.auth.credentials as credential_store
from todo_api.core.errors import (
    DuplicateEmail,
    InvalidCredentials,
    UserNotFound,
    ValidationError,
)
from todo_api.storage import Collections


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_create_and_find(self, credentials):
        user = await credentials.create_user("Example@Example.com ", "qwerty1234")

        assert user.email == "example@example.com"
        assert (await credentials.find_by_id(user.id)).email == user.email
        assert (await credentials.find_by_email("EXAMPLE@example.com")).id == user.id

    @pytest.mark.asyncio
    async def test_password_never_stored_plain(self, credentials, storage):
        user = await credentials.create_user("example@example.com", "qwerty1234")

        doc = await storage.metadata.get(Collections.USERS, user.id)
        assert "qwerty1234" not in str(doc)
        assert credentials.verify_password(user, "qwerty1234")

    @pytest.mark.asyncio
    async def test_duplicate_email(self, credentials, storage):
        await credentials.create_user("example@example.com", "qwerty1234")

        with pytest.raises(DuplicateEmail):
            await credentials.create_user("EXAMPLE@example.com", "Password123!")

        assert len(await storage.metadata.query(Collections.USERS)) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,password", [
        ("and", "qwerty1234"),
        ("no-at-sign.example.com", "qwerty1234"),
        ("example@example.com", "123"),
    ])
    async def test_validation(self, credentials, email, password):
        with pytest.raises(ValidationError):
            await credentials.create_user(email, password)

    @pytest.mark.asyncio
    async def test_unknown_user(self, credentials):
        with pytest.raises(UserNotFound):
            await credentials.find_by_id("0" * 32)
        with pytest.raises(UserNotFound):
            await credentials.find_by_email("nobody@example.com")


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_register_then_login(self, credentials, tokens):
        created = await credentials.create_user("example@example.com", "qwerty1234")

        user = await credentials.authenticate("example@example.com", "qwerty1234")
        token = tokens.issue(user.id)
        await credentials.add_token(user.id, token)

        assert user.id == created.id
        assert (await tokens.verify(token)).user_id == created.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, credentials):
        await credentials.create_user("example@example.com", "qwerty1234")

        with pytest.raises(InvalidCredentials) as wrong_password:
            await credentials.authenticate("example@example.com", "wrong-password")
        with pytest.raises(InvalidCredentials) as unknown_email:
            await credentials.authenticate("nobody@example.com", "qwerty1234")

        assert wrong_password.value.message == unknown_email.value.message

    @pytest.mark.asyncio
    async def test_unknown_email_still_hashes(self, credentials, monkeypatch):
        calls = []
        real_verify = credential_store.verify_password

        def recording_verify(candidate, stored):
            calls.append(stored)
            return real_verify(candidate, stored)

        monkeypatch.setattr(credential_store, "verify_password", recording_verify)

        with pytest.raises(InvalidCredentials):
            await credentials.authenticate("nobody@example.com", "qwerty1234")

        assert len(calls) == 1


class TestTokens:
    @pytest.mark.asyncio
    async def test_multiple_sessions(self, credentials):
        user = await credentials.create_user("example@example.com", "qwerty1234")
        await credentials.add_token(user.id, "first")
        await credentials.add_token(user.id, "second")

        stored = await credentials.find_by_id(user.id)
        assert [t.token for t in stored.tokens] == ["first", "second"]
        assert all(t.access == "auth" for t in stored.tokens)

    @pytest.mark.asyncio
    async def test_remove_is_idempotent(self, credentials):
        user = await credentials.create_user("example@example.com", "qwerty1234")
        await credentials.add_token(user.id, "first")

        await credentials.remove_token(user.id, "first")
        await credentials.remove_token(user.id, "first")

        assert (await credentials.find_by_id(user.id)).tokens == []
        assert await credentials.find_by_token(user.id, "first") is None

    @pytest.mark.asyncio
    async def test_add_token_to_missing_user(self, credentials):
        with pytest.raises(UserNotFound):
            await credentials.add_token("0" * 32, "token")

    @pytest.mark.asyncio
    async def test_find_by_token_checks_scope(self, credentials):
        user = await credentials.create_user("example@example.com", "qwerty1234")
        await credentials.add_token(user.id, "first")

        assert await credentials.find_by_token(user.id, "first") is not None
        assert await credentials.find_by_token(user.id, "first", scope="admin") is None


class TestChangePassword:
    @pytest.mark.asyncio
    async def test_change_revokes_all_tokens(self, credentials):
        user = await credentials.create_user("example@example.com", "qwerty1234")
        await credentials.add_token(user.id, "first")
        await credentials.add_token(user.id, "second")

        updated = await credentials.change_password(user.id, "qwerty1234", "newPassword")

        assert updated.tokens == []
        await credentials.authenticate("example@example.com", "newPassword")
        with pytest.raises(InvalidCredentials):
            await credentials.authenticate("example@example.com", "qwerty1234")

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, credentials):
        user = await credentials.create_user("example@example.com", "qwerty1234")
        await credentials.add_token(user.id, "first")

        with pytest.raises(InvalidCredentials):
            await credentials.change_password(user.id, "nope", "newPassword")

        assert len((await credentials.find_by_id(user.id)).tokens) == 1

    @pytest.mark.asyncio
    async def test_new_password_too_short(self, credentials):
        user = await credentials.create_user("example@example.com", "qwerty1234")
        with pytest.raises(ValidationError):
            await credentials.change_password(user.id, "qwerty1234", "123")
