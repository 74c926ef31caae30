"""Session: process-wide auth state with explicit persistence.

The session is constructed once by the CLI and passed to whatever needs it
(the API client's token provider, the result handler, the route guard), so
tests can hand in a Session over a MemoryBackend instead of touching disk.

State is only ever replaced wholesale: set_auth() writes the full pair,
clear_auth() removes it. There is no expiry logic here; the server reports
an expired token with a 401 and the result handler calls clear_auth().
"""

from __future__ import annotations

import logging
from typing import Any

from reviewdesk_store.base import STORAGE_KEY, SessionBackend
from reviewdesk_store.models import AuthState

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, backend: SessionBackend, key: str = STORAGE_KEY):
        self._backend = backend
        self._key = key
        self._state = AuthState.from_dict(backend.read(key))
        if self._state.token:
            logger.debug("Rehydrated session for %s", (self._state.user or {}).get("username", "unknown user"))

    @property
    def token(self) -> str | None:
        return self._state.token

    @property
    def user(self) -> dict[str, Any] | None:
        return self._state.user

    @property
    def state(self) -> AuthState:
        return AuthState(token=self._state.token, user=self._state.user)

    def set_auth(self, token: str, user: dict[str, Any] | None) -> None:
        """Persist a fresh token/user pair, replacing whatever was stored."""
        self._state = AuthState(token=token, user=user)
        self._backend.write(self._key, self._state.to_dict())

    def clear_auth(self) -> None:
        self._backend.remove(self._key)
        self._state = AuthState()

    def is_authenticated(self) -> bool:
        return bool(self._state.token)

    def current_user(self) -> dict[str, Any] | None:
        return self._state.user

    def close(self) -> None:
        self._backend.close()
