"""
Tests for the in-memory document store.
"""

import pytest

from todo_api.storage import DuplicateKeyError, InMemoryMetadataStorage


@pytest.fixture
def db():
    return InMemoryMetadataStorage()


class TestInsert:
    @pytest.mark.asyncio
    async def test_insert_and_get(self, db):
        await db.insert("users", "u1", {"id": "u1", "email": "a@example.com"})

        doc = await db.get("users", "u1")
        assert doc["email"] == "a@example.com"
        assert doc["_id"] == "u1"

    @pytest.mark.asyncio
    async def test_unique_field_rejected(self, db):
        await db.insert("users", "u1", {"email": "a@example.com"}, unique=("email",))

        with pytest.raises(DuplicateKeyError) as exc:
            await db.insert("users", "u2", {"email": "a@example.com"}, unique=("email",))

        assert exc.value.field == "email"
        assert len(await db.query("users")) == 1

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, db):
        await db.insert("todos", "t1", {"text": "a"})
        with pytest.raises(DuplicateKeyError):
            await db.insert("todos", "t1", {"text": "b"})

    @pytest.mark.asyncio
    async def test_returned_docs_are_copies(self, db):
        await db.insert("users", "u1", {"tokens": []})

        doc = await db.get("users", "u1")
        doc["tokens"].append({"token": "x"})

        assert (await db.get("users", "u1"))["tokens"] == []


class TestQueries:
    @pytest.mark.asyncio
    async def test_query_filters_and_order(self, db):
        await db.insert("todos", "t1", {"owner_id": "a", "text": "one"})
        await db.insert("todos", "t2", {"owner_id": "b", "text": "two"})
        await db.insert("todos", "t3", {"owner_id": "a", "text": "three"})

        docs = await db.query("todos", {"owner_id": "a"})
        assert [d["text"] for d in docs] == ["one", "three"]

        page = await db.query("todos", limit=1, offset=1)
        assert [d["_id"] for d in page] == ["t2"]

    @pytest.mark.asyncio
    async def test_find_one_and_update_respects_filters(self, db):
        await db.insert("todos", "t1", {"id": "t1", "owner_id": "a", "text": "one"})

        assert await db.find_one_and_update(
            "todos", {"id": "t1", "owner_id": "b"}, {"text": "hijacked"}
        ) is None

        doc = await db.find_one_and_update(
            "todos", {"id": "t1", "owner_id": "a"}, {"text": "edited"}
        )
        assert doc["text"] == "edited"

    @pytest.mark.asyncio
    async def test_find_one_and_delete(self, db):
        await db.insert("todos", "t1", {"id": "t1", "owner_id": "a"})

        assert await db.find_one_and_delete("todos", {"id": "t1", "owner_id": "b"}) is None
        removed = await db.find_one_and_delete("todos", {"id": "t1", "owner_id": "a"})

        assert removed["_id"] == "t1"
        assert await db.get("todos", "t1") is None


class TestListOperations:
    @pytest.mark.asyncio
    async def test_push_and_pull(self, db):
        await db.insert("users", "u1", {"tokens": []})

        assert await db.push("users", "u1", "tokens", {"access": "auth", "token": "a"})
        assert await db.push("users", "u1", "tokens", {"access": "auth", "token": "b"})
        assert await db.pull("users", "u1", "tokens", {"token": "a"})

        doc = await db.get("users", "u1")
        assert doc["tokens"] == [{"access": "auth", "token": "b"}]

    @pytest.mark.asyncio
    async def test_pull_absent_item_is_success(self, db):
        await db.insert("users", "u1", {"tokens": []})
        assert await db.pull("users", "u1", "tokens", {"token": "nope"})

    @pytest.mark.asyncio
    async def test_missing_document(self, db):
        assert not await db.push("users", "ghost", "tokens", {"token": "a"})
        assert not await db.pull("users", "ghost", "tokens", {"token": "a"})
