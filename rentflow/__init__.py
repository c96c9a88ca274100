# rentflow/__init__.py
from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import missing_settings
from .errors import register_error_handlers
from .extensions import db, jwt, migrate

__version__ = "1.0.0"

API_PREFIX = "/api"


LOG_HANDLER_NAME = "rentflow"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(process)d] %(message)s"


def allowed_origins(config) -> list[str]:
    """Local frontend origins for each dev port, then any configured extras."""
    origins = [f"http://{host}:{port}"
               for port in config.get("FRONTEND_DEV_PORTS", ())
               for host in ("localhost", "127.0.0.1")]
    for origin in (config.get("CORS_ALLOWED_ORIGINS") or "").split(","):
        origin = origin.strip().rstrip("/")
        if origin and origin not in origins:
            origins.append(origin)
    return origins


def _load_config(app: Flask, config_object: Optional[str | Any]) -> None:
    if config_object is None:
        config_object = os.getenv("CONFIG_CLASS", "rentflow.config.Config")

    if isinstance(config_object, str):
        # load "package.ClassName"
        module, _, cls = config_object.rpartition(".")
        if module:
            conf = getattr(__import__(module, fromlist=[cls]), cls)
            app.config.from_object(conf)
        else:
            app.config.from_object(config_object)
    else:
        app.config.from_object(config_object)

    uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    # Heroku/Render style URLs use the old scheme name
    if uri.startswith("postgres://"):
        app.config["SQLALCHEMY_DATABASE_URI"] = "postgresql://" + uri[len("postgres://"):]


def _configure_logging(app: Flask) -> None:
    """One stderr handler on the root logger, shared by app and client code."""
    level = app.config.get("LOG_LEVEL") or os.getenv("LOG_LEVEL", "INFO").upper()
    root = logging.getLogger()
    root.setLevel(level)
    app.logger.setLevel(level)
    if any(h.get_name() == LOG_HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.set_name(LOG_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def _configure_cors(app: Flask) -> None:
    # Bearer tokens, no cookies; invoices are downloaded so their filename header is exposed
    CORS(
        app,
        resources={f"{API_PREFIX}/*": {"origins": allowed_origins(app.config)}},
        allow_headers=["Authorization", "Content-Type"],
        expose_headers=["Content-Disposition"],
        methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        max_age=3600,
    )


def _configure_proxy(app: Flask) -> None:
    """Respect X-Forwarded-* from the hosting proxy."""
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore


def _init_extensions(app: Flask) -> None:
    from . import models  # noqa: F401  (registers tables on db.metadata)
    from . import security  # noqa: F401  (registers jwt loaders)

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)


def _register_blueprints(app: Flask) -> None:
    """Register all API blueprints under /api."""
    from .routes import BLUEPRINTS

    for bp in BLUEPRINTS:
        app.register_blueprint(bp, url_prefix=API_PREFIX)
        app.logger.debug("Registered blueprint %s at %s", bp.name, API_PREFIX)


def _register_cli(app: Flask) -> None:
    from .cli import register_cli

    register_cli(app)


def create_diagnostic_app(missing: list[str]) -> Flask:
    """Stand-in app served when required settings are absent.

    Every path answers 503 with the missing variable names and how to set
    them, so a misconfigured deploy explains itself instead of crashing.
    """
    app = Flask(__name__)
    _configure_logging(app)
    app.logger.error("Missing required configuration: %s", ", ".join(missing))

    body = {
        "error": "Server configuration error",
        "missing": missing,
        "remediation": [
            f"Set the {name} environment variable (for example in a .env file) and restart the server."
            for name in missing
        ],
    }

    @app.route("/", defaults={"_path": ""}, methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    @app.route("/<path:_path>", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    def misconfigured(_path: str):
        return jsonify(dict(body, path=request.path)), 503

    return app


# --- Application Factory ------------------------------------------------------
def create_app(config_object: Optional[str | Any] = None) -> Flask:
    """
    Standard Flask application factory.

    `config_object` may be:
      - a config object
      - dotted path to a config class (e.g., "rentflow.config.TestConfig")
      - None (then CONFIG_CLASS env or rentflow.config.Config)
    """
    app = Flask(__name__, instance_relative_config=True)
    _load_config(app, config_object)

    missing = missing_settings(app.config)
    if missing:
        return create_diagnostic_app(missing)

    app.config.setdefault("API_PREFIX", API_PREFIX)

    # Core middleware/logging/CORS
    _configure_logging(app)
    _configure_proxy(app)
    _configure_cors(app)

    # Init extensions & blueprints
    _init_extensions(app)
    _register_blueprints(app)
    _register_cli(app)
    register_error_handlers(app)

    @app.get("/")
    def root():
        return jsonify({"service": "rentflow", "message": "See /api/health"}), 200

    app.logger.info("RentFlow API ready (%s)", datetime.utcnow().isoformat() + "Z")
    return app
