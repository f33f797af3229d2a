"""Saved vocabulary API."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from eureka.routes.common import json_body, json_error, require_login_json
from eureka.services import vocabulary_service
from eureka.utils.logging import get_logger

LOG = get_logger("routes.vocabulary")

bp = Blueprint("vocabulary", __name__, url_prefix="/api/vocabulary")


@bp.route("", methods=["GET"])
def api_list():
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        words = vocabulary_service.list_words(
            user_id,
            query=request.args.get("q"),
            status=request.args.get("status", "all"),
        )
    except vocabulary_service.VocabularyValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify({"words": words})


@bp.route("", methods=["POST"])
def api_save():
    user_id, denied = require_login_json()
    if denied:
        return denied
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    try:
        entry = vocabulary_service.save_word(
            user_id,
            payload.get("word") or "",
            book_id=payload.get("book_id"),
            book_title=payload.get("book_title"),
        )
    except vocabulary_service.VocabularyValidationError as exc:
        return json_error(str(exc), 400)
    except vocabulary_service.VocabularyExistsError as exc:
        return json_error(str(exc), 409)
    return jsonify({"word": entry}), 201


@bp.route("/stats", methods=["GET"])
def api_stats():
    user_id, denied = require_login_json()
    if denied:
        return denied
    return jsonify(vocabulary_service.vocabulary_stats(user_id))


@bp.route("/<int:entry_id>/mastered", methods=["POST"])
def api_toggle_mastered(entry_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        entry = vocabulary_service.toggle_mastered(user_id, entry_id)
    except vocabulary_service.VocabularyNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"word": entry})


@bp.route("/<int:entry_id>/review", methods=["POST"])
def api_review(entry_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        entry = vocabulary_service.record_review(user_id, entry_id)
    except vocabulary_service.VocabularyNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"word": entry})


@bp.route("/<int:entry_id>", methods=["DELETE"])
def api_delete(entry_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        vocabulary_service.delete_word(user_id, entry_id)
    except vocabulary_service.VocabularyNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"status": "deleted", "id": entry_id})


def register_vocabulary_blueprint(app):
    if not getattr(app, "_vocabulary_bp", None):
        app.register_blueprint(bp)
        setattr(app, "_vocabulary_bp", bp)


__all__ = ["register_vocabulary_blueprint", "bp"]
