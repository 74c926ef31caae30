"""Session state persisted between CLI invocations.

Kept free of reviewdesk_core types so the store can be used on its own: the
user is held as the raw JSON object the backend returned, and the CLI maps
it to a typed User when it needs one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AuthState:
    """The token/user pair. Both are None when signed out."""

    token: str | None = None
    user: dict[str, Any] | None = None

    def to_dict(self) -> dict:
        return {"token": self.token, "user": self.user}

    @classmethod
    def from_dict(cls, data: dict | None) -> AuthState:
        if not data:
            return cls()
        token = data.get("token") or None
        user = data.get("user")
        return cls(token=token, user=user if isinstance(user, dict) else None)
