"""Author directory and follow API."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from eureka.routes.common import json_error, require_login_json
from eureka.services import authors_service
from eureka.utils import get_current_user_id

bp = Blueprint("authors", __name__, url_prefix="/api/authors")


@bp.route("", methods=["GET"])
def api_list():
    try:
        authors = authors_service.list_authors(request.args.get("sort", "newest"))
    except authors_service.AuthorValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify({"authors": authors})


@bp.route("/<string:author_id>", methods=["GET"])
def api_get(author_id: str):
    return jsonify(authors_service.get_author(author_id, viewer_id=get_current_user_id()))


@bp.route("/<string:author_id>/follow", methods=["POST"])
def api_follow(author_id: str):
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        result = authors_service.toggle_follow(user_id, author_id)
    except authors_service.AuthorValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify(result)


def register_authors_blueprint(app):
    if not getattr(app, "_authors_bp", None):
        app.register_blueprint(bp)
        setattr(app, "_authors_bp", bp)


__all__ = ["register_authors_blueprint", "bp"]
