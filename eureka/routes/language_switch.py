"""Language switch endpoint for users and anonymous visitors."""
from __future__ import annotations

from flask import Blueprint, jsonify, request, session

from eureka.i18n.preferences import SESSION_LOCALE_KEY, SUPPORTED_LANGUAGES, normalize_language_choice
from eureka.routes.common import json_error
from eureka.utils.logging import get_logger

LOG = get_logger("language_switch")

bp = Blueprint("language_switch", __name__)


@bp.route("/language/switch", methods=["POST", "GET"])
def switch_language():
    payload = request.get_json(silent=True) or {}
    raw_lang = payload.get("language") or request.values.get("language") or request.values.get("lang")
    normalized = normalize_language_choice(raw_lang)
    if not normalized:
        return json_error("unsupported_language", 400, details={"supported": list(SUPPORTED_LANGUAGES)})
    session[SESSION_LOCALE_KEY] = normalized
    session.modified = True
    LOG.debug("Session language set to %s", normalized)
    return jsonify({"language": normalized})


def register_language_switch(app):
    if not getattr(app, "_language_switch_bp", None):
        app.register_blueprint(bp)
        setattr(app, "_language_switch_bp", bp)


__all__ = ["register_language_switch", "bp"]
