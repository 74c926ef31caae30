"""Abstract session backend.

A backend is a tiny key/value surface, the same shape as browser local
storage: the session writes one JSON document under STORAGE_KEY and reads it
back on start-up. Session depends on SessionBackend, not on a concrete
backend, so file, SQLite and in-memory storage are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

STORAGE_KEY = "auth-storage"


class SessionBackend(ABC):
    """Pluggable persistence for the auth state."""

    @abstractmethod
    def read(self, key: str) -> dict | None:
        """Return the document stored under key, or None when absent or unreadable."""

    @abstractmethod
    def write(self, key: str, value: dict) -> None:
        """Replace the document stored under key."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key. Removing a missing key is not an error."""

    def close(self) -> None:
        """Release any resources held by the backend.

        Default is a no-op so callers can always call close() safely.
        """
