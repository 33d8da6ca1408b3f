"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

import os

from flask import Flask, jsonify, send_from_directory

from .extensions import db, login_manager, migrate
from .error_handlers import register_error_handlers
from .listeners import init_activity_listener
from .logging_config import setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Replace Flask's default handler with the configured console/file handlers."""

    setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        json_format=app.config.get("LOG_JSON", False),
    )


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from ..modules.auth.services.token_service import register_token_loader

    register_token_loader(login_manager)


def configure_static_audio(app: Flask) -> None:
    """Serve downloaded pronunciation files from the audio directory."""

    audio_folder = app.config["AUDIO_FOLDER"]

    @app.route("/audio/<path:filename>")
    def audio_file(filename):
        return send_from_directory(audio_folder, filename)

    app.logger.info("Serving audio files from %s at /audio", audio_folder)


def register_core_routes(app: Flask) -> None:
    """Register endpoints that do not belong to a feature module."""

    @app.route("/api/health")
    def health_check():
        return jsonify({"status": "OK", "message": "Server is running"})


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)
    register_error_handlers(app)
    init_activity_listener()


def initialize_database(app: Flask) -> None:
    """Create database tables and, unless disabled, the default data."""

    from .. import models  # noqa: F401  (registers every table)
    from .seeds import seed_default_data

    db.create_all()

    if app.config.get("SEED_DEFAULT_DATA", False):
        seed_default_data(app)
    else:
        app.logger.info("Seed data disabled, skipping default users and wordbooks.")
