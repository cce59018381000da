"""
Core module - fundamental data models and infrastructure.

This module contains:
- models: Core data models (UserInDB, AuthToken, Todo)
- errors: Domain error taxonomy
- utils: Shared utility functions
"""

from todo_api.core.models import (
    AuthToken,
    Todo,
    TokenScope,
    UserInDB,
    UserResponse,
    Utf8Str,
)

from todo_api.core.utils import (
    epoch_millis,
    generate_id,
    is_valid_id,
    utc_now,
)

__all__ = [
    # Models
    "AuthToken",
    "Todo",
    "TokenScope",
    "UserInDB",
    "UserResponse",
    "Utf8Str",
    # Utils
    "epoch_millis",
    "generate_id",
    "is_valid_id",
    "utc_now",
]
