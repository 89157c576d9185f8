"""Shared fixtures for coursedb tests.

Every test gets its own SQLite file under tmp_path, so schema and data never
leak between tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from coursedb import create_app
from coursedb.database import db as _db
from coursedb.models.models import load_seed

if TYPE_CHECKING:
    from collections.abc import Iterator

    from flask import Flask
    from flask.testing import FlaskCliRunner

    from coursedb.database import DBClient


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Location of the per-test SQLite database file."""
    return tmp_path / "instance" / "coursedb-test.db"


@pytest.fixture
def app(db_path: Path) -> Iterator[Flask]:
    """App on TestingConfig with an empty, migrated schema."""
    app = create_app(
        "testing",
        overrides={"DATABASE_URI": f"sqlite:///{db_path}", "SEED_ON_STARTUP": False},
    )
    with app.app_context():
        yield app
    _db.close()


@pytest.fixture
def db(app: Flask) -> DBClient:
    """The configured DBClient with an empty schema."""
    return _db


@pytest.fixture
def seeded(db: DBClient) -> DBClient:
    """The configured DBClient with the reference dataset loaded."""
    load_seed()
    return db


@pytest.fixture
def runner(app: Flask) -> FlaskCliRunner:
    """Flask CLI runner bound to the test app."""
    return app.test_cli_runner()
