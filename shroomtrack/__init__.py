import logging
import os
from typing import Any

from flask import Flask, jsonify
from sqlalchemy.pool import StaticPool

from .authz import configure_login_manager
from .blueprints_registry import register_blueprints
from .config import env
from .extensions import cache, csrf, db, limiter, migrate
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    os.makedirs(app.instance_path, exist_ok=True)

    _load_config(app, config or {})
    _configure_sqlite_engine_options(app)
    configure_logging(app)
    for warning in env.warnings:
        logger.warning("Environment configuration warning: %s", warning)

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    cache.init_app(app, config={
        "CACHE_TYPE": app.config["CACHE_TYPE"],
        "CACHE_DEFAULT_TIMEOUT": app.config["CACHE_DEFAULT_TIMEOUT"],
    })
    limiter.init_app(app)
    if app.config.get("ENV") == "production" and app.config["RATELIMIT_STORAGE_URI"].startswith("memory://"):
        logger.warning("Rate limiter is using in-process memory storage in production.")

    configure_login_manager(app)
    register_blueprints(app)
    from . import models  # noqa: F401

    _add_core_routes(app)
    _install_error_handlers(app)

    from .management import register_commands

    register_commands(app)

    if app.config.get("SQLALCHEMY_CREATE_ALL"):
        with app.app_context():
            db.create_all()
        logger.info("Tables created via db.create_all(); Alembic was bypassed")

    return app


def _load_config(app: Flask, overrides: dict[str, Any]) -> None:
    target = "TestingConfig" if overrides.get("TESTING") else "Config"
    app.config.from_object(f"shroomtrack.config.{target}")
    app.config.update(overrides)

    if "DATABASE_URL" in overrides:
        app.config["SQLALCHEMY_DATABASE_URI"] = overrides["DATABASE_URL"]
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        if app.config.get("ENV") != "development":
            raise RuntimeError("DATABASE_URL must be set outside development and testing.")
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///" + os.path.join(app.instance_path, "shroomtrack.db")


def _configure_sqlite_engine_options(app: Flask) -> None:
    uri = app.config["SQLALCHEMY_DATABASE_URI"]
    if not uri.startswith("sqlite"):
        return
    opts = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS", {}))
    # SQLite has no connection pool sizing
    opts.pop("pool_size", None)
    opts.pop("max_overflow", None)
    if uri == "sqlite:///:memory:":
        opts["poolclass"] = StaticPool
        opts["connect_args"] = {"check_same_thread": False}
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = opts


def _install_error_handlers(app: Flask) -> None:
    from flask_wtf.csrf import CSRFError
    from sqlalchemy.exc import DBAPIError, SQLAlchemyError

    def _rollback():
        try:
            db.session.rollback()
        except SQLAlchemyError:
            logger.exception("Session rollback failed")

    @app.teardown_request
    def _rollback_on_error(exc):
        if exc is not None:
            _rollback()

    @app.errorhandler(DBAPIError)
    def _db_error_handler(e):
        _rollback()
        logger.error("Database error: %s", e)
        return jsonify({
            "success": False,
            "message": "Storage is temporarily unavailable. Please try again shortly.",
            "errors": {"code": "persistence_failure"},
        }), 503

    @app.errorhandler(CSRFError)
    def _csrf_error_handler(err: CSRFError):
        logger.warning("CSRF validation failed: %s", err.description)
        return jsonify({
            "success": False,
            "message": "CSRF validation failed. Fetch a token from /auth/csrf and retry.",
            "errors": {"reason": err.description},
        }), 400

    @app.errorhandler(404)
    def _not_found(_err):
        return jsonify({"success": False, "message": "Not found", "errors": {}}), 404

    @app.errorhandler(429)
    def _rate_limited(err):
        return jsonify({"success": False, "message": f"Rate limit exceeded: {err.description}", "errors": {}}), 429


def _add_core_routes(app: Flask) -> None:
    @app.route("/health")
    def health():
        return jsonify({
            "status": "ok",
            "environment": app.config.get("FLASK_ENV"),
            "demoMode": bool(app.config.get("DEMO_MODE")),
            "sheetSyncConfigured": bool(app.config.get("SHEET_SYNC_URL")),
        })
