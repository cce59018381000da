"""
Services - business logic on top of storage.
"""

from todo_api.services.todos import TodoService

__all__ = [
    "TodoService",
]
