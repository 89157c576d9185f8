import os
from dotenv import load_dotenv
from pathlib import Path

from typing import Type

from flask import Flask

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s | %(name)-20s | %(levelname)-8s | %(message)s"
DEFAULT_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_FILE = None
DEFAULT_SESSION_LIFETIME = 1440

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Base configuration – never use directly."""
    SECRET_KEY: str | None = os.getenv("APP_SECRET", "")

    LOG_LEVEL = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)
    LOG_FORMAT = os.getenv("LOG_FORMAT", DEFAULT_LOG_FORMAT)
    LOG_DATEFMT = os.getenv("LOG_DATEFMT", DEFAULT_LOG_DATEFMT)
    LOG_FILE = os.getenv("LOG_FILE", DEFAULT_LOG_FILE)

    DATABASE_URI = os.getenv(
        "DATABASE_URL", f"sqlite:///{os.path.join(os.getcwd(), 'instance', 'scripting_course.db')}"
    )

    AUTO_MIGRATE = _env_flag("AUTO_MIGRATE", True)
    SEED_ON_STARTUP = _env_flag("SEED_ON_STARTUP", False)

    # seconds a row in the sessions table survives without being touched
    SESSION_LIFETIME = int(os.getenv("SESSION_LIFETIME", DEFAULT_SESSION_LIFETIME))

    @staticmethod
    def init_app(app: Flask) -> None:
        pass


class DevelopmentConfig(Config):
    DEBUG = True

    @staticmethod
    def init_app(app: Flask) -> None:
        app.logger.debug("Development mode active")


class ProductionConfig(Config):
    AUTO_MIGRATE = _env_flag("AUTO_MIGRATE", False)

    @staticmethod
    def init_app(app: Flask) -> None:
        # Never fall back to the bundled SQLite file in prod
        if app.config["DATABASE_URI"].startswith("sqlite:///") and not os.getenv("DATABASE_URL"):
            raise ValueError(
                "DATABASE_URL must be set in production. "
                "Set it in .env or environment variables."
            )


class TestingConfig(Config):
    TESTING = True
    DATABASE_URI = "sqlite:///:memory:"  # in-memory for speed
    AUTO_MIGRATE = True
    SEED_ON_STARTUP = False
    LOG_FILE = None


config_by_name: dict[str, Type[Config]] = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
