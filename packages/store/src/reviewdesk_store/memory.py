"""In-memory backend: nothing survives the process.

Used by tests and by `--no-persist` runs, where the session should behave
normally for one invocation and leave no token on disk.
"""

from __future__ import annotations

import copy

from reviewdesk_store.base import SessionBackend


class MemoryBackend(SessionBackend):
    def __init__(self, initial: dict[str, dict] | None = None):
        self._data: dict[str, dict] = copy.deepcopy(initial) if initial else {}

    def read(self, key: str) -> dict | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def write(self, key: str, value: dict) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
