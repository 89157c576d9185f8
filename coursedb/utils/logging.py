"""
Logging for the app factory and the modules under it.
create_app() calls setup_logging() for every app it builds; module code asks get_logger(__name__).
"""
import logging
import logging.handlers
import os
from typing import Optional

from flask import Flask, current_app, has_app_context
from ..config import DEFAULT_LOG_LEVEL, DEFAULT_LOG_FORMAT, DEFAULT_LOG_DATEFMT

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 7


def log_level(app: Flask) -> int:
    """DEBUG under a debug app, otherwise LOG_LEVEL (unknown names fall back to INFO)."""
    if app.debug:
        return logging.DEBUG
    level_name = str(app.config.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def _file_handler(app: Flask, log_file: str) -> Optional[logging.Handler]:
    try:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        return logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
    except OSError as exc:
        app.logger.warning(f"Cannot log to {log_file}: {exc}")
        return None


def setup_logging(app: Flask) -> None:
    """
    Point the root logger and app.logger at stderr, plus LOG_FILE when set.
    Replaces whatever handlers a previous app installed.
    """
    level = log_level(app)
    formatter = logging.Formatter(
        app.config.get("LOG_FORMAT") or DEFAULT_LOG_FORMAT,
        datefmt=app.config.get("LOG_DATEFMT") or DEFAULT_LOG_DATEFMT,
    )

    handlers = [logging.StreamHandler()]
    log_file = app.config.get("LOG_FILE")
    if log_file:
        file_handler = _file_handler(app, log_file)
        if file_handler is not None:
            handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    app.logger.propagate = False
    app.logger.handlers = root.handlers[:]
    app.logger.setLevel(level)
    app.logger.info(
        f"Logging at {logging.getLevelName(level)}"
        + (f", file {log_file}" if len(handlers) > 1 else "")
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    logger = get_logger(__name__)
    Children of app.logger inside an app context, of the "coursedb" logger outside one.
    """
    if has_app_context() and current_app:
        base = current_app.logger
    else:
        base = logging.getLogger("coursedb")

    if not name or name == "__main__":
        return base

    return base.getChild(name.split(".")[-1] if "." in name else name)
