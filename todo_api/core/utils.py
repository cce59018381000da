"""
Shared utility functions for the todo service.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def generate_id() -> str:
    """
    Generate a unique document ID.

    Returns:
        32 lowercase hex characters, e.g. "9f1c2a...".
    """
    return uuid.uuid4().hex


def is_valid_id(value: str) -> bool:
    """Whether ``value`` has the shape of an ID produced by generate_id()."""
    return bool(_ID_PATTERN.match(value))


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def epoch_millis(moment: datetime | None = None) -> int:
    """Milliseconds since the Unix epoch (defaults to now)."""
    moment = moment or utc_now()
    return int(moment.timestamp() * 1000)
