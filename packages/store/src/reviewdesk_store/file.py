"""FileBackend: a JSON file holding every key as a top-level member.

This is the default backend. The file lives under the user's config
directory and is written with 0600 permissions because it carries a bearer
token.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from reviewdesk_store.base import SessionBackend

logger = logging.getLogger(__name__)

DEFAULT_SESSION_PATH = Path.home() / ".config" / "reviewdesk" / "session.json"


class FileBackend(SessionBackend):
    """Stores session documents in a single JSON file.

    A missing or corrupt file reads as empty rather than raising, so a
    damaged session file only costs the user a fresh login.
    """

    def __init__(self, path: str | os.PathLike | None = None):
        self._path = Path(path) if path else DEFAULT_SESSION_PATH

    @property
    def path(self) -> Path:
        return self._path

    def read(self, key: str) -> dict | None:
        value = self._load().get(key)
        return value if isinstance(value, dict) else None

    def write(self, key: str, value: dict) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)

    def _load(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict) -> None:
        # Created 0600 then swapped in, so the token is never readable by others.
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            f.write(json.dumps(data, indent=2))
        os.replace(tmp, self._path)
