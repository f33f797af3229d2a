"""Admin JSON API for maintaining the word dictionary."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from eureka.routes.common import json_body, json_error, require_admin_json
from eureka.services import dictionary_service
from eureka.utils.logging import get_logger

LOG = get_logger("routes.admin_dictionary")

bp = Blueprint("dictionary_admin", __name__, url_prefix="/admin/dictionary")


@bp.route("/api/words", methods=["GET"])
def api_words_list():
    auth = require_admin_json()
    if auth is not True:
        return auth
    return jsonify({"words": dictionary_service.list_words(request.args.get("q"))})


@bp.route("/api/words", methods=["POST"])
def api_words_create():
    auth = require_admin_json()
    if auth is not True:
        return auth
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    try:
        word = dictionary_service.create_word(payload)
    except dictionary_service.DictionaryValidationError as exc:
        return json_error(str(exc), 400)
    except dictionary_service.DictionaryWordExistsError as exc:
        return json_error(str(exc), 409)
    return jsonify({"word": word}), 201


@bp.route("/api/words/<int:word_id>", methods=["PUT"])
def api_words_update(word_id: int):
    auth = require_admin_json()
    if auth is not True:
        return auth
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    try:
        word = dictionary_service.update_word(word_id, payload)
    except dictionary_service.DictionaryValidationError as exc:
        return json_error(str(exc), 400)
    except dictionary_service.DictionaryWordExistsError as exc:
        return json_error(str(exc), 409)
    except dictionary_service.DictionaryWordNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"word": word})


@bp.route("/api/words/<int:word_id>", methods=["DELETE"])
def api_words_delete(word_id: int):
    auth = require_admin_json()
    if auth is not True:
        return auth
    try:
        dictionary_service.delete_word(word_id)
    except dictionary_service.DictionaryWordNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"status": "deleted", "id": word_id})


def register_dictionary_admin_blueprint(app):
    if not getattr(app, "_dictionary_admin_bp", None):
        app.register_blueprint(bp)
        setattr(app, "_dictionary_admin_bp", bp)


__all__ = ["register_dictionary_admin_blueprint", "bp"]
