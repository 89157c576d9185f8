import os
from typing import Any, Dict, Optional

from flask import Flask

from dotenv import load_dotenv

from .config import config_by_name
from .utils.logging import setup_logging
from .database import db

load_dotenv()

def create_app(config_name: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Application factory.
    Keeps startup side-effects isolated and testable.
    """
    config_name = config_name or os.getenv("FLASK_ENV", "default")
    app = Flask(__name__, instance_relative_config=True)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    app.config.from_object(config_by_name[config_name])
    if overrides:
        app.config.update(overrides)
    config_by_name[config_name].init_app(app)
    app.config.from_envvar("COURSEDB_SETTINGS", silent=True)

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    setup_logging(app)

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------
    db.init_app(app)

    with app.app_context():
        if app.config.get("AUTO_MIGRATE"):
            db.sync_schema()

        from .models import models
        if app.config.get("SEED_ON_STARTUP") and models.is_empty():
            models.load_seed()

    from .commands import register_commands
    register_commands(app)

    app.logger.info("coursedb %s ready (backend: %s)", config_name, db.backend)
    return app
