"""Personal bookshelf API."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from eureka.routes.common import json_body, json_error, require_login_json
from eureka.services import bookshelf_service
from eureka.utils.logging import get_logger

LOG = get_logger("routes.bookshelf")

bp = Blueprint("bookshelf", __name__, url_prefix="/api/bookshelf")


@bp.route("", methods=["GET"])
def api_list():
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        books = bookshelf_service.list_books(user_id, request.args.get("status") or None)
    except bookshelf_service.BookshelfValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify({"books": books})


@bp.route("", methods=["POST"])
def api_add():
    user_id, denied = require_login_json()
    if denied:
        return denied
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    try:
        entry = bookshelf_service.add_book(user_id, payload)
    except bookshelf_service.BookshelfValidationError as exc:
        return json_error(str(exc), 400)
    except bookshelf_service.BookshelfEntryExistsError as exc:
        return json_error(str(exc), 409)
    return jsonify({"book": entry}), 201


@bp.route("/summary", methods=["GET"])
def api_summary():
    user_id, denied = require_login_json()
    if denied:
        return denied
    return jsonify(bookshelf_service.shelf_summary(user_id))


@bp.route("/<int:entry_id>", methods=["PATCH"])
def api_update(entry_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    try:
        entry = bookshelf_service.update_book(user_id, entry_id, payload)
    except bookshelf_service.BookshelfValidationError as exc:
        return json_error(str(exc), 400)
    except bookshelf_service.BookshelfEntryNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"book": entry})


@bp.route("/<int:entry_id>", methods=["DELETE"])
def api_delete(entry_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        bookshelf_service.delete_book(user_id, entry_id)
    except bookshelf_service.BookshelfEntryNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"status": "deleted", "id": entry_id})


@bp.route("/<int:entry_id>/tags", methods=["POST", "DELETE"])
def api_tags(entry_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    tag = payload.get("tag") or request.args.get("tag") or ""
    try:
        if request.method == "POST":
            entry = bookshelf_service.add_tag(user_id, entry_id, tag)
        else:
            entry = bookshelf_service.remove_tag(user_id, entry_id, tag)
    except bookshelf_service.BookshelfValidationError as exc:
        return json_error(str(exc), 400)
    except bookshelf_service.BookshelfEntryNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"book": entry})


def register_bookshelf_blueprint(app):
    if not getattr(app, "_bookshelf_bp", None):
        app.register_blueprint(bp)
        setattr(app, "_bookshelf_bp", bp)


__all__ = ["register_bookshelf_blueprint", "bp"]
