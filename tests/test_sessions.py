"""Tests for the database-backed session store."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from coursedb.models.sessions import SessionStore
from coursedb.utils.exceptions import ValidationError

if TYPE_CHECKING:
    from flask import Flask

    from coursedb.database import DBClient


@pytest.fixture
def store(db: DBClient) -> SessionStore:
    return SessionStore(lifetime=1440)


def _age_session(db: DBClient, session_id: str) -> None:
    db.execute(
        "UPDATE sessions SET last_accessed = ? WHERE id = ?",
        ("2000-01-01 00:00:00", session_id),
        fetch="none",
    )


def _idle_for(db: DBClient, session_id: str, seconds: int) -> None:
    db.execute(
        "UPDATE sessions SET last_accessed = datetime('now', ?) WHERE id = ?",
        (f"-{seconds} seconds", session_id),
        fetch="none",
    )


class TestSessionStore:
    """read / write / destroy / gc over the sessions table."""

    def test_read_unknown_is_empty(self, store: SessionStore) -> None:
        assert store.read("nobody") == ""

    def test_write_then_read(self, store: SessionStore) -> None:
        assert store.write("abc123", "user_id|i:1;")
        assert store.read("abc123") == "user_id|i:1;"

    def test_write_replaces(self, store: SessionStore, db: DBClient) -> None:
        store.write("abc123", "first")
        store.write("abc123", "second")
        assert store.read("abc123") == "second"
        rows = db.execute("SELECT id FROM sessions")
        assert len(rows) == 1

    def test_write_refreshes_last_accessed(self, store: SessionStore, db: DBClient) -> None:
        store.write("abc123", "data")
        _age_session(db, "abc123")
        store.write("abc123", "data")
        row = db.execute("SELECT last_accessed FROM sessions WHERE id = ?", ("abc123",), fetch="one")
        assert row["last_accessed"].year > 2000

    def test_destroy(self, store: SessionStore) -> None:
        store.write("abc123", "data")
        assert store.destroy("abc123") is True
        assert store.read("abc123") == ""
        assert store.destroy("abc123") is False

    def test_gc_removes_only_stale(self, store: SessionStore, db: DBClient) -> None:
        store.write("stale", "old")
        store.write("fresh", "new")
        _age_session(db, "stale")
        assert store.gc() == 1
        assert store.read("stale") == ""
        assert store.read("fresh") == "new"

    def test_gc_with_explicit_lifetime(self, store: SessionStore, db: DBClient) -> None:
        store.write("a", "1")
        _age_session(db, "a")
        assert store.gc(max_lifetime=10**10) == 0
        assert store.gc(max_lifetime=60) == 1

    @pytest.mark.parametrize("session_id", ["", "x" * 129])
    def test_bad_session_id(self, store: SessionStore, session_id: str) -> None:
        with pytest.raises(ValidationError):
            store.read(session_id)


class TestSessionLifetime:
    """The default lifetime follows the SESSION_LIFETIME setting."""

    def test_default_from_config(self, app: Flask, db: DBClient) -> None:
        assert SessionStore().lifetime == app.config["SESSION_LIFETIME"]

    def test_explicit_lifetime_wins(self, app: Flask, db: DBClient) -> None:
        app.config["SESSION_LIFETIME"] = 60
        assert SessionStore(lifetime=5).lifetime == 5

    def test_gc_uses_configured_lifetime(self, app: Flask, db: DBClient) -> None:
        app.config["SESSION_LIFETIME"] = 60
        store = SessionStore()
        assert store.lifetime == 60
        store.write("idle", "old")
        store.write("recent", "new")
        _idle_for(db, "idle", 600)
        _idle_for(db, "recent", 10)
        assert store.gc() == 1
        assert store.read("idle") == ""
        assert store.read("recent") == "new"

    def test_longer_configured_lifetime_keeps_sessions(self, app: Flask, db: DBClient) -> None:
        app.config["SESSION_LIFETIME"] = 3600
        store = SessionStore()
        store.write("idle", "old")
        _idle_for(db, "idle", 600)
        assert store.gc() == 0
        assert store.read("idle") == "old"
