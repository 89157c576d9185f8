"""Tests for the app factory, configuration and shared helpers."""

from __future__ import annotations

import datetime
import logging.handlers
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from coursedb import create_app
from coursedb.config import ProductionConfig, TestingConfig, config_by_name
from coursedb.database import db as shared_db
from coursedb.models.models import is_empty, row_counts
from coursedb.utils.exceptions import CourseDBError, SeedError, ValidationError
from coursedb.utils.helpers import dumps, json_safe, mysql_avg, to_date, to_datetime, to_decimal
from coursedb.utils.logging import get_logger, log_level

if TYPE_CHECKING:
    from pathlib import Path

    from flask import Flask


class TestCreateApp:
    def test_testing_config(self, app: Flask) -> None:
        assert app.config["TESTING"] is True
        assert app.extensions["coursedb"] is shared_db

    def test_registers_commands(self, app: Flask) -> None:
        for name in ("init-db", "drop-db", "seed-db", "reset-db", "export-db", "import-db", "query"):
            assert name in app.cli.commands

    def test_seed_on_startup(self, tmp_path: Path) -> None:
        app = create_app(
            "testing",
            overrides={"DATABASE_URI": f"sqlite:///{tmp_path / 'boot.db'}", "SEED_ON_STARTUP": True},
        )
        with app.app_context():
            assert row_counts()["products"] == 20
        # a restart against the same file leaves the data alone
        app = create_app(
            "testing",
            overrides={"DATABASE_URI": f"sqlite:///{tmp_path / 'boot.db'}", "SEED_ON_STARTUP": True},
        )
        with app.app_context():
            assert row_counts()["products"] == 20
        shared_db.close()

    def test_in_memory_default(self) -> None:
        app = create_app("testing")
        with app.app_context():
            assert is_empty()
        shared_db.close()

    def test_production_requires_database_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ValueError, match="DATABASE_URL"):
            create_app("production", overrides={"DATABASE_URI": "sqlite:///instance/x.db"})

    def test_config_names(self) -> None:
        assert config_by_name["testing"] is TestingConfig
        assert config_by_name["production"] is ProductionConfig
        assert ProductionConfig.AUTO_MIGRATE in (True, False)


class TestExceptions:
    def test_default_message_and_payload(self) -> None:
        err = ValidationError(column="price")
        assert err.message == "Invalid input"
        assert str(err) == "Invalid input"
        assert err.payload == {"column": "price"}
        assert err.exit_code == 1

    def test_seed_error_exit_code(self) -> None:
        assert SeedError("boom").exit_code == 2
        assert isinstance(SeedError("boom"), CourseDBError)


class TestHelpers:
    @pytest.mark.parametrize(
        ("value", "places", "expected"),
        [
            ("10.005", 2, "10.01"),
            ("10.004", 2, "10.00"),
            (2.1, 2, "2.10"),
            (0.1 + 0.2, 2, "0.30"),
            (5, 2, "5.00"),
            (Decimal("1.23456"), 6, "1.234560"),
        ],
    )
    def test_to_decimal(self, value: object, places: int, expected: str) -> None:
        assert str(to_decimal(value, places)) == expected

    def test_to_decimal_rejects_garbage(self) -> None:
        with pytest.raises(ValidationError):
            to_decimal("12,5")
        with pytest.raises(ValidationError):
            to_decimal("NaN")

    def test_mysql_avg(self) -> None:
        assert str(mysql_avg("15259.80", 20)) == "762.990000"
        assert str(mysql_avg("1129.93", 7)) == "161.418571"
        assert mysql_avg(None, 0) is None

    def test_dates(self) -> None:
        assert to_date("2024-01-15 10:30:00") == datetime.date(2024, 1, 15)
        assert to_date(datetime.datetime(2024, 1, 15, 10, 30)) == datetime.date(2024, 1, 15)
        assert to_datetime("2024-01-15 10:30:00") == datetime.datetime(2024, 1, 15, 10, 30)
        assert to_date(None) is None
        with pytest.raises(ValidationError):
            to_date("15/01/2024")

    def test_json_safe(self) -> None:
        value = {
            "price": Decimal("1.50"),
            "when": datetime.datetime(2024, 1, 1, 9, 0),
            "day": datetime.date(2024, 1, 1),
            "tags": ("a", "b"),
        }
        assert json_safe(value) == {
            "price": "1.50",
            "when": "2024-01-01 09:00:00",
            "day": "2024-01-01",
            "tags": ["a", "b"],
        }
        assert dumps({"name": "Café"}) == '{"name": "Café"}'


class TestLogging:
    def test_logger_outside_app_context(self) -> None:
        logger = get_logger("coursedb.models.queries")
        assert logger.name == "coursedb.queries"
        assert isinstance(logger, logging.Logger)

    def test_logger_inside_app_context(self, app: Flask) -> None:
        logger = get_logger("coursedb.models.queries")
        assert logger.parent is app.logger or logger.name.startswith(app.logger.name)

    def test_level_from_config(self) -> None:
        app = create_app("testing", overrides={"LOG_LEVEL": "warning"})
        assert log_level(app) == logging.WARNING
        assert app.logger.level == logging.WARNING
        app.config["LOG_LEVEL"] = "chatty"
        assert log_level(app) == logging.INFO
        app.debug = True
        assert log_level(app) == logging.DEBUG
        shared_db.close()

    def test_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "coursedb.log"
        app = create_app("testing", overrides={"LOG_FILE": str(log_file)})
        file_handlers = [
            h for h in app.logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert [h.baseFilename for h in file_handlers] == [str(log_file)]
        get_logger("coursedb.commands").warning("written to disk")
        for handler in file_handlers:
            handler.flush()
        assert "written to disk" in log_file.read_text(encoding="utf-8")
        for handler in file_handlers:
            handler.close()
        shared_db.close()

    def test_unwritable_log_file_keeps_console(self, tmp_path: Path) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        app = create_app("testing", overrides={"LOG_FILE": str(blocker / "coursedb.log")})
        assert len(app.logger.handlers) == 1
        assert not isinstance(app.logger.handlers[0], logging.handlers.RotatingFileHandler)
        shared_db.close()
