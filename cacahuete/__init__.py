from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, Optional

from flask import Flask

from .extensions import db, migrate, csrf
from .logging_config import configure_logging
from .settings import (
    DEFAULT_EXPIRES_AT,
    DEFAULT_PARTICIPANTS,
    DEFAULT_RESET_CODE,
    DEFAULT_STORAGE_KEY,
    DrawSettings,
)
from .views.draw import draw_bp


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


def create_app(config_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)

    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite:///cacahuete.db")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # Draw constants: who takes part, where the record lives, how to wipe it, when it ends
    app.config["CACAHUETE_PARTICIPANTS"] = os.environ.get("CACAHUETE_PARTICIPANTS") or DEFAULT_PARTICIPANTS
    app.config["CACAHUETE_STORAGE_KEY"] = os.environ.get("CACAHUETE_STORAGE_KEY", DEFAULT_STORAGE_KEY)
    app.config["CACAHUETE_RESET_CODE"] = os.environ.get("CACAHUETE_RESET_CODE", DEFAULT_RESET_CODE)
    app.config["CACAHUETE_EXPIRES_AT"] = os.environ.get("CACAHUETE_EXPIRES_AT", DEFAULT_EXPIRES_AT)

    app.config["CACAHUETE_LOG_LEVEL"] = os.environ.get("CACAHUETE_LOG_LEVEL", "INFO")
    app.config["CACAHUETE_LOG_JSON"] = _env_flag("CACAHUETE_LOG_JSON")

    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(
        level=app.config["CACAHUETE_LOG_LEVEL"],
        format_json=app.config["CACAHUETE_LOG_JSON"],
    )

    # Fail at startup on a bad participant list or cutoff instant.
    app.extensions["cacahuete"] = DrawSettings.from_config(app.config)

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    app.register_blueprint(draw_bp)

    with app.app_context():
        db.create_all()

    @app.context_processor
    def inject_global_state():
        return {"app_title": "Cacahuète de Noël"}

    return app
