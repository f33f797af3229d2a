"""Application initialization / wiring.

Orchestrates: Flask config, Babel, DB init and route registration.
"""
from __future__ import annotations
from typing import Any, Dict, Optional

from flask import Flask

from eureka import config as app_config
from eureka.db import init_engine_once
from eureka.i18n import configure_translations, init_babel
from eureka.routes.inject import register_all as register_routes
from eureka.utils.logging import get_logger

LOG = get_logger("eureka.startup")


def init_app(app: Any) -> None:
    LOG.debug("init_app starting")
    if not app.config.get("SECRET_KEY"):
        app.config["SECRET_KEY"] = app_config.secret_key()
    app.json.ensure_ascii = False  # type: ignore[attr-defined]
    init_babel(app)
    configure_translations(app)
    init_engine_once()
    LOG.debug("DB engine initialized")
    register_routes(app)
    LOG.info("App startup wiring complete config=%s", app_config.summarize_runtime_config())


def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(app_config.APP_NAME)
    app.config["SECRET_KEY"] = app_config.secret_key()
    if config_overrides:
        app.config.update(config_overrides)
    init_app(app)
    return app


__all__ = ["init_app", "create_app"]
