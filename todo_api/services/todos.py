"""
Todo service - CRUD scoped to the calling user.

Every read and write filters on ``owner_id``. A todo that exists but
belongs to someone else is indistinguishable from one that does not
exist: both raise TodoNotFound.
"""

from __future__ import annotations

import logging

from todo_api.core.errors import TodoNotFound, ValidationError
from todo_api.core.models import Todo
from todo_api.core.utils import epoch_millis, is_valid_id
from todo_api.storage import Collections, StorageProvider

logger = logging.getLogger(__name__)


def _clean_text(text: str) -> str:
    text = text.strip()
    if not text:
        raise ValidationError("Todo text must not be empty")
    return text


class TodoService:
    """Owner-scoped todo operations."""

    def __init__(self, storage: StorageProvider):
        self.db = storage.metadata

    def _scope(self, owner_id: str, todo_id: str) -> dict[str, str]:
        # Malformed ids get the same answer as missing ones
        if not is_valid_id(todo_id):
            raise TodoNotFound()
        return {"id": todo_id, "owner_id": owner_id}

    async def create(self, owner_id: str, text: str) -> Todo:
        todo = Todo(text=_clean_text(text), owner_id=owner_id)
        await self.db.insert(Collections.TODOS, todo.id, todo.model_dump())
        logger.debug("Created todo %s for %s", todo.id, owner_id)
        return todo

    async def find_all(self, owner_id: str) -> list[Todo]:
        docs = await self.db.query(Collections.TODOS, {"owner_id": owner_id})
        return [Todo.model_validate(doc) for doc in docs]

    async def get(self, owner_id: str, todo_id: str) -> Todo:
        doc = await self.db.find_one(Collections.TODOS, self._scope(owner_id, todo_id))
        if doc is None:
            raise TodoNotFound()
        return Todo.model_validate(doc)

    async def delete(self, owner_id: str, todo_id: str) -> Todo:
        doc = await self.db.find_one_and_delete(
            Collections.TODOS, self._scope(owner_id, todo_id)
        )
        if doc is None:
            raise TodoNotFound()
        logger.debug("Deleted todo %s for %s", todo_id, owner_id)
        return Todo.model_validate(doc)

    async def update(
        self,
        owner_id: str,
        todo_id: str,
        text: str | None = None,
        completed: bool | None = None,
    ) -> Todo:
        """
        Update text and/or completion.

        Completing an open todo stamps ``completed_at``; completing an
        already-completed one keeps the original stamp. Reopening clears
        it. Leaving ``completed`` out leaves completion untouched.
        """
        scope = self._scope(owner_id, todo_id)
        updates: dict[str, object] = {}
        if text is not None:
            updates["text"] = _clean_text(text)

        if completed is False:
            updates["completed"] = False
            updates["completed_at"] = None
        elif completed is True:
            current = await self.get(owner_id, todo_id)
            if not current.completed:
                updates["completed"] = True
                updates["completed_at"] = epoch_millis()

        doc = await self.db.find_one_and_update(Collections.TODOS, scope, updates)
        if doc is None:
            raise TodoNotFound()
        return Todo.model_validate(doc)
