"""Profile API and public avatar media."""
from __future__ import annotations

from flask import Blueprint, jsonify, request, send_from_directory

from eureka.routes.common import json_body, json_error, require_login_json
from eureka.services import avatar_service, profiles_service
from eureka.utils.logging import get_logger

LOG = get_logger("routes.profile")

bp = Blueprint("profile", __name__, url_prefix="/api/profile")
media_bp = Blueprint("media", __name__, url_prefix="/media")

_CROP_KEYS = ("x", "y", "width", "height")


@bp.route("", methods=["GET"])
def api_get():
    user_id, denied = require_login_json()
    if denied:
        return denied
    profiles_service.ensure_profile(user_id)
    return jsonify(profiles_service.get_profile_overview(user_id))


@bp.route("", methods=["PUT"])
def api_update():
    user_id, denied = require_login_json()
    if denied:
        return denied
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    profiles_service.ensure_profile(user_id)
    try:
        profile = profiles_service.update_profile(user_id, payload)
    except profiles_service.ProfileValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify({"profile": profile})


@bp.route("/favorites/<string:kind>", methods=["POST", "DELETE"])
def api_favorites(kind: str):
    user_id, denied = require_login_json()
    if denied:
        return denied
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    value = payload.get("value") or request.args.get("value") or ""
    profiles_service.ensure_profile(user_id)
    try:
        if request.method == "POST":
            values = profiles_service.add_favorite(user_id, kind, value)
        else:
            values = profiles_service.remove_favorite(user_id, kind, value)
    except profiles_service.ProfileValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify({"kind": kind, "values": values})


@bp.route("/avatar", methods=["POST"])
def api_avatar():
    user_id, denied = require_login_json()
    if denied:
        return denied
    upload = request.files.get("avatar") or request.files.get("file")
    if upload is None:
        return json_error("file_required", 400)
    # read one byte past the cap so oversize files are detectable
    data = upload.read(avatar_service.MAX_UPLOAD_BYTES + 1)
    crop = {key: request.form.get(key) for key in _CROP_KEYS}
    try:
        size = int(request.form.get("size", avatar_service.DEFAULT_SIZE))
    except (TypeError, ValueError):
        size = avatar_service.DEFAULT_SIZE
    try:
        result = avatar_service.upload_avatar(user_id, data, crop, size)
    except avatar_service.AvatarValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify(result), 201


@media_bp.route("/avatars/<path:filename>", methods=["GET"])
def avatar_file(filename: str):
    return send_from_directory(avatar_service.avatar_dir(), filename, mimetype="image/jpeg")


def register_profile_blueprint(app):
    if not getattr(app, "_profile_bp", None):
        app.register_blueprint(bp)
        app.register_blueprint(media_bp)
        setattr(app, "_profile_bp", bp)


__all__ = ["register_profile_blueprint", "bp", "media_bp"]
