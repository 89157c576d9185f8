"""Tests for DBClient: configuration, dialect helpers and error translation."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

import pytest

from coursedb.database import Backend, DBClient
from coursedb.utils.exceptions import (
    CourseDBError,
    ReferentialIntegrityViolation,
    UniqueConstraintViolation,
    ValidationError,
)

if TYPE_CHECKING:
    from pathlib import Path


class TestConfigure:
    @pytest.mark.parametrize(
        ("uri", "backend"),
        [
            ("sqlite:///:memory:", Backend.SQLITE),
            ("sqlite:////tmp/course.db", Backend.SQLITE),
            ("postgresql://u:p@localhost/course", Backend.POSTGRESQL),
            ("postgres://u:p@localhost/course", Backend.POSTGRESQL),
            ("mysql://u:p@localhost/course", Backend.MYSQL),
        ],
    )
    def test_backend_from_uri(self, uri: str, backend: Backend) -> None:
        assert DBClient(uri).backend == backend

    def test_unsupported_uri(self) -> None:
        with pytest.raises(ValueError):
            DBClient("oracle://localhost/course")

    def test_connect_before_configure(self) -> None:
        with pytest.raises(RuntimeError):
            DBClient().execute("SELECT 1")


class TestDialect:
    def test_placeholders(self) -> None:
        query = "SELECT * FROM users WHERE id = ?"
        assert DBClient("sqlite:///:memory:").sql(query) == query
        assert DBClient("postgresql://localhost/x").sql(query) == "SELECT * FROM users WHERE id = %s"
        assert DBClient("mysql://localhost/x").sql(query) == "SELECT * FROM users WHERE id = %s"

    def test_like_operator(self) -> None:
        assert DBClient("postgresql://localhost/x").like == "ILIKE"
        assert DBClient("mysql://localhost/x").like == "LIKE"
        assert DBClient("sqlite:///:memory:").like == "LIKE"

    def test_year_expression(self) -> None:
        assert DBClient("mysql://localhost/x").year_of("order_date") == "YEAR(order_date)"
        assert "strftime('%Y', order_date)" in DBClient("sqlite:///:memory:").year_of("order_date")
        assert "EXTRACT(YEAR FROM order_date)" in DBClient("postgresql://localhost/x").year_of("order_date")


class TestInMemory:
    """An in-memory database lives on one shared connection."""

    def test_data_survives_between_operations(self) -> None:
        client = DBClient("sqlite:///:memory:")
        try:
            client.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT)", fetch="none")
            client.execute("INSERT INTO t (v) VALUES (?)", ("kept",), fetch="none")
            assert client.execute("SELECT v FROM t") == [{"v": "kept"}]
        finally:
            client.close()

    def test_file_database_created(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "course.db"
        client = DBClient(f"sqlite:///{path}")
        client.execute("CREATE TABLE t (id INTEGER PRIMARY KEY)", fetch="none")
        assert path.exists()


class TestErrorTranslation:
    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("UNIQUE constraint failed: users.email", UniqueConstraintViolation),
            ("FOREIGN KEY constraint failed", ReferentialIntegrityViolation),
            ("CHECK constraint failed: status", ValidationError),
            ("NOT NULL constraint failed: products.price", ValidationError),
        ],
    )
    def test_sqlite_messages(self, message: str, expected: type[CourseDBError]) -> None:
        translated = DBClient.translate_integrity_error(sqlite3.IntegrityError(message))
        assert type(translated) is expected
        assert message in translated.message

    def test_mysql_error_codes(self) -> None:
        duplicate = Exception(1062, "Duplicate entry 'x' for key 'email'")
        orphan = Exception(1452, "Cannot add or update a child row")
        assert DBClient.is_duplicate(duplicate)
        assert DBClient.is_duplicate(duplicate, column="email")
        assert DBClient.is_foreign_key(orphan)
        assert not DBClient.is_foreign_key(duplicate)

    def test_transaction_rolled_back(self, tmp_path: Path) -> None:
        client = DBClient(f"sqlite:///{tmp_path / 'tx.db'}")
        client.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT UNIQUE)", fetch="none")
        with pytest.raises(UniqueConstraintViolation):
            with client.connection() as (conn, cur):
                cur.execute("INSERT INTO t (v) VALUES ('a')")
                cur.execute("INSERT INTO t (v) VALUES ('a')")
        assert client.execute("SELECT * FROM t") == []
