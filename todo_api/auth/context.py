"""
Auth context - who is calling, resolved once per request.

This is the lightweight object passed to route handlers. Handlers never
read the token header themselves; they scope everything by
``ctx.user_id``.
"""

from __future__ import annotations

from dataclasses import dataclass

from todo_api.core.models import TokenScope


@dataclass(frozen=True)
class AuthContext:
    """
    Authenticated caller for a request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_auth)):
            print(f"User {ctx.user_id} is calling")
    """

    user_id: str
    user_email: str
    token: str
    scope: str = TokenScope.AUTH.value
