# Future annotations for forward reference typing compatibility
from __future__ import annotations

import logging
import os
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from .config import Config
from .errors import ApiError
from .extensions import db
from .realtime import Realtime


log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=log_format)
    logging.getLogger().setLevel(level)
    # Reduce noisy third-party loggers so we only see our explicit logs and exceptions
    for _noisy_name in (
        "engineio",
        "engineio.server",
        "socketio",
        "socketio.server",
    ):
        logging.getLogger(_noisy_name).setLevel(logging.WARNING)


# Application factory returning a configured Flask app and its socket service
def create_app(config_object: type = Config, realtime: Optional[Realtime] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Bind SQLAlchemy to the app
    db.init_app(app)

    # Resolve allowed origins from configuration for both Flask and Socket.IO
    origins_cfg = app.config["CORS_ORIGINS"]
    if origins_cfg.strip() == "*":
        allowed_origins = "*"
    else:
        allowed_origins = [o.strip() for o in origins_cfg.split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": allowed_origins}})

    with app.app_context():
        # Import models to register metadata with SQLAlchemy
        from . import models  # noqa: F401

        uri = app.config["SQLALCHEMY_DATABASE_URI"]
        if uri.startswith("sqlite:///"):
            os.makedirs(os.path.dirname(uri[len("sqlite:///"):]) or ".", exist_ok=True)
        db.create_all()

    # One socket service per app, handed to every socket handler and blueprint
    realtime = realtime or Realtime()
    register_routes(app, realtime)
    realtime.init_app(app, allowed_origins=allowed_origins)
    return app


# Helper to bind routes and error handlers
def register_routes(app: Flask, realtime: Realtime) -> None:
    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok", "realtime": realtime.ready})

    @app.errorhandler(ApiError)
    def _handle_api_error(e: ApiError):
        if e.status_code >= 500:
            logging.error("API %s %s failed: %s", request.method, request.path, e.message)
        return jsonify({"error": e.message}), e.status_code

    from .views.api import register_blueprints

    register_blueprints(app, realtime)


__all__ = ["create_app", "Realtime"]
