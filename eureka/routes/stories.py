"""Stories API: writing, browsing, reactions and comments."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from eureka.routes.common import json_body, json_error, require_login_json
from eureka.services import profiles_service, social_service, stories_service
from eureka.utils import get_current_user_id, is_admin_user
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("routes.stories")

bp = Blueprint("stories", __name__, url_prefix="/api/stories")
comments_bp = Blueprint("comments", __name__, url_prefix="/api/comments")


def _story_error(exc: Exception):
    if isinstance(exc, stories_service.StoryValidationError):
        return json_error(str(exc), 400)
    if isinstance(exc, stories_service.StoryNotFoundError):
        return json_error(str(exc), 404)
    return json_error(str(exc), 403)


_STORY_ERRORS = (
    stories_service.StoryValidationError,
    stories_service.StoryNotFoundError,
    stories_service.StoryAccessError,
)


@bp.route("", methods=["GET"])
def api_list():
    try:
        stories = stories_service.list_published(
            query=request.args.get("q"),
            genre=request.args.get("genre"),
            sort_by=request.args.get("sort", "latest"),
        )
    except stories_service.StoryValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify({"stories": stories, "genres": list(stories_service.GENRES)})


def _save(story_id=None):
    user_id, denied = require_login_json()
    if denied:
        return denied
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    status = payload.get("status")
    if status is None or isinstance(status, str):
        status = clean_text(status) or "draft"
    profiles_service.ensure_profile(user_id)
    try:
        story = stories_service.save_story(user_id, payload, status, story_id=story_id)
    except _STORY_ERRORS as exc:
        return _story_error(exc)
    return jsonify({"story": story}), (201 if story_id is None else 200)


@bp.route("", methods=["POST"])
def api_create():
    return _save()


@bp.route("/mine", methods=["GET"])
def api_mine():
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        stories = stories_service.list_my_stories(user_id, request.args.get("tab", "all"))
    except stories_service.StoryValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify({"stories": stories})


@bp.route("/bookmarks", methods=["GET"])
def api_bookmarks():
    user_id, denied = require_login_json()
    if denied:
        return denied
    return jsonify({"stories": social_service.list_bookmarks(user_id)})


@bp.route("/<int:story_id>", methods=["GET"])
def api_get(story_id: int):
    try:
        story = stories_service.get_story(story_id, viewer_id=get_current_user_id())
    except _STORY_ERRORS as exc:
        return _story_error(exc)
    return jsonify({"story": story})


@bp.route("/<int:story_id>", methods=["PUT"])
def api_update(story_id: int):
    return _save(story_id)


@bp.route("/<int:story_id>", methods=["DELETE"])
def api_delete(story_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        stories_service.delete_story(user_id, story_id)
    except _STORY_ERRORS as exc:
        return _story_error(exc)
    return jsonify({"status": "deleted", "id": story_id})


@bp.route("/<int:story_id>/publish", methods=["POST"])
def api_toggle_publish(story_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        story = stories_service.toggle_publish(user_id, story_id)
    except _STORY_ERRORS as exc:
        return _story_error(exc)
    return jsonify({"story": story})


@bp.route("/<int:story_id>/view", methods=["POST"])
def api_view(story_id: int):
    try:
        stories_service.require_published(story_id, get_current_user_id())
        count = stories_service.record_view(story_id)
    except _STORY_ERRORS as exc:
        return _story_error(exc)
    return jsonify({"view_count": count})


@bp.route("/<int:story_id>/like", methods=["POST"])
def api_like(story_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        result = social_service.toggle_like(user_id, story_id)
    except _STORY_ERRORS as exc:
        return _story_error(exc)
    return jsonify(result)


@bp.route("/<int:story_id>/bookmark", methods=["POST"])
def api_bookmark(story_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        result = social_service.toggle_bookmark(user_id, story_id)
    except _STORY_ERRORS as exc:
        return _story_error(exc)
    return jsonify(result)


@bp.route("/<int:story_id>/comments", methods=["GET"])
def api_comments(story_id: int):
    try:
        stories_service.require_published(story_id, get_current_user_id())
    except _STORY_ERRORS as exc:
        return _story_error(exc)
    return jsonify(social_service.list_comments(story_id))


@bp.route("/<int:story_id>/comments", methods=["POST"])
def api_comment_post(story_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    parent = payload.get("parent_comment_id")
    try:
        parent_id = int(parent) if parent not in (None, "") else None
    except (TypeError, ValueError):
        return json_error("invalid_parent", 400)
    try:
        comment = social_service.post_comment(user_id, story_id, payload.get("content") or "", parent_id)
    except social_service.CommentValidationError as exc:
        return json_error(str(exc), 400)
    except _STORY_ERRORS as exc:
        return _story_error(exc)
    return jsonify({"comment": comment}), 201


@comments_bp.route("/<int:comment_id>", methods=["DELETE"])
def api_comment_delete(comment_id: int):
    user_id, denied = require_login_json()
    if denied:
        return denied
    try:
        removed = social_service.delete_comment(user_id, comment_id, is_admin=is_admin_user())
    except social_service.CommentNotFoundError as exc:
        return json_error(str(exc), 404)
    except social_service.CommentAccessError as exc:
        return json_error(str(exc), 403)
    return jsonify({"status": "deleted", "id": comment_id, "removed": removed})


def register_stories_blueprint(app):
    if not getattr(app, "_stories_bp", None):
        app.register_blueprint(bp)
        app.register_blueprint(comments_bp)
        setattr(app, "_stories_bp", bp)


__all__ = ["register_stories_blueprint", "bp", "comments_bp"]
