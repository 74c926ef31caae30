"""Tests for reviewdesk-store: session state and its backends."""

from __future__ import annotations

import json
import os
import stat

import pytest

from reviewdesk_store.base import STORAGE_KEY
from reviewdesk_store.file import FileBackend
from reviewdesk_store.memory import MemoryBackend
from reviewdesk_store.models import AuthState
from reviewdesk_store.session import Session
from reviewdesk_store.sqlite import SQLiteBackend

USER = {"id": 1, "username": "admin", "email": "admin@example.com"}


@pytest.fixture(params=["memory", "file", "sqlite"])
def backend(request, tmp_path):
    if request.param == "memory":
        b = MemoryBackend()
    elif request.param == "file":
        b = FileBackend(tmp_path / "session.json")
    else:
        b = SQLiteBackend(db_path=str(tmp_path / "session.db"))
    yield b
    b.close()


# ---------------------------------------------------------------------------
# AuthState
# ---------------------------------------------------------------------------


class TestAuthState:
    def test_from_none_is_signed_out(self):
        assert AuthState.from_dict(None) == AuthState(token=None, user=None)

    def test_empty_token_reads_as_none(self):
        assert AuthState.from_dict({"token": "", "user": USER}).token is None

    def test_non_dict_user_is_dropped(self):
        assert AuthState.from_dict({"token": "t", "user": "admin"}).user is None

    def test_to_dict(self):
        assert AuthState(token="t", user=USER).to_dict() == {"token": "t", "user": USER}


# ---------------------------------------------------------------------------
# Backends (shared contract)
# ---------------------------------------------------------------------------


class TestBackendContract:
    def test_read_missing_key_returns_none(self, backend):
        assert backend.read("missing") is None

    def test_write_then_read(self, backend):
        backend.write("k", {"a": 1})
        assert backend.read("k") == {"a": 1}

    def test_write_replaces_whole_document(self, backend):
        backend.write("k", {"a": 1, "b": 2})
        backend.write("k", {"a": 3})
        assert backend.read("k") == {"a": 3}

    def test_remove(self, backend):
        backend.write("k", {"a": 1})
        backend.remove("k")
        assert backend.read("k") is None

    def test_remove_missing_key_is_not_an_error(self, backend):
        backend.remove("never-written")

    def test_keys_are_independent(self, backend):
        backend.write("one", {"v": 1})
        backend.write("two", {"v": 2})
        backend.remove("one")
        assert backend.read("two") == {"v": 2}


class TestMemoryBackend:
    def test_returned_documents_are_copies(self):
        b = MemoryBackend()
        b.write("k", {"nested": {"x": 1}})
        b.read("k")["nested"]["x"] = 99
        assert b.read("k") == {"nested": {"x": 1}}

    def test_initial_data(self):
        b = MemoryBackend({STORAGE_KEY: {"token": "t", "user": None}})
        assert b.read(STORAGE_KEY) == {"token": "t", "user": None}


class TestFileBackend:
    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "deep" / "dir" / "session.json"
        FileBackend(path).write("k", {"a": 1})
        assert json.loads(path.read_text()) == {"k": {"a": 1}}

    def test_file_is_private(self, tmp_path):
        path = tmp_path / "session.json"
        FileBackend(path).write("k", {"a": 1})
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_token_never_lands_in_a_readable_file(self, tmp_path, mocker):
        path = tmp_path / "session.json"
        path.write_text("{}")
        os.chmod(path, 0o644)
        modes = []
        real_replace = os.replace

        def replace(src, dst):
            modes.append(stat.S_IMODE(os.stat(src).st_mode))
            real_replace(src, dst)

        mocker.patch("reviewdesk_store.file.os.replace", side_effect=replace)
        old_umask = os.umask(0)
        try:
            FileBackend(path).write("auth-storage", {"token": "secret"})
        finally:
            os.umask(old_umask)

        assert modes == [0o600]
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
        assert json.loads(path.read_text()) == {"auth-storage": {"token": "secret"}}
        assert [p.name for p in tmp_path.iterdir()] == ["session.json"]

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        assert FileBackend(path).read("k") is None

    def test_non_object_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("[1, 2]")
        assert FileBackend(path).read("k") is None

    def test_path_property(self, tmp_path):
        assert FileBackend(tmp_path / "s.json").path == tmp_path / "s.json"


class TestSQLiteBackend:
    def test_persists_across_connections(self, tmp_path):
        db = str(tmp_path / "s.db")
        first = SQLiteBackend(db_path=db)
        first.write("k", {"a": 1})
        first.close()

        second = SQLiteBackend(db_path=db)
        assert second.read("k") == {"a": 1}
        second.close()


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class TestSession:
    def test_starts_signed_out(self, backend):
        session = Session(backend)
        assert session.token is None
        assert session.user is None
        assert session.is_authenticated() is False

    def test_set_auth(self, backend):
        session = Session(backend)
        session.set_auth("tok", USER)
        assert session.token == "tok"
        assert session.current_user() == USER
        assert session.is_authenticated() is True
        assert backend.read(STORAGE_KEY) == {"token": "tok", "user": USER}

    def test_rehydrates_from_backend(self, backend):
        Session(backend).set_auth("tok", USER)
        restored = Session(backend)
        assert restored.token == "tok"
        assert restored.user == USER

    def test_clear_auth_resets_both_fields(self, backend):
        session = Session(backend)
        session.set_auth("tok", USER)
        session.clear_auth()
        assert session.state == AuthState(token=None, user=None)
        assert backend.read(STORAGE_KEY) is None
        assert Session(backend).is_authenticated() is False

    def test_set_auth_overwrites_previous_user(self, backend):
        session = Session(backend)
        session.set_auth("old", USER)
        session.set_auth("new", {"id": 2, "username": "ops"})
        assert session.token == "new"
        assert session.user == {"id": 2, "username": "ops"}

    def test_custom_key(self):
        backend = MemoryBackend()
        Session(backend, key="other").set_auth("tok", None)
        assert backend.read(STORAGE_KEY) is None
        assert backend.read("other") == {"token": "tok", "user": None}

    def test_state_is_a_copy(self):
        session = Session(MemoryBackend())
        session.set_auth("tok", USER)
        state = session.state
        state.token = "changed"
        assert session.token == "tok"
