"""Reader API: book text, word lookup, story locations and place search."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from eureka.routes.common import (
    json_body,
    json_error,
    require_admin_json,
    upstream_error,
)
from eureka.services import (
    catalog_service,
    dictionary_service,
    geocoding_service,
    locations_service,
)
from eureka.utils.logging import get_logger

LOG = get_logger("routes.reader")

bp = Blueprint("reader", __name__, url_prefix="/api/reader")
geo_bp = Blueprint("geo", __name__, url_prefix="/api/geo")


@bp.route("/<int:book_id>", methods=["GET"])
def api_book(book_id: int):
    try:
        book = catalog_service.get_aozora_book(book_id)
    except catalog_service.BookNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"book": book})


@bp.route("/lookup", methods=["GET"])
def api_lookup():
    try:
        entry = dictionary_service.lookup_word(request.args.get("word"))
    except dictionary_service.DictionaryValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify(entry)


@bp.route("/<int:book_id>/locations", methods=["GET"])
def api_locations(book_id: int):
    summary = locations_service.route_summary(book_id)
    query = request.args.get("q")
    locations = locations_service.list_locations(book_id, query) if query else summary["locations"]
    return jsonify({"locations": locations, "route": summary})


@bp.route("/<int:book_id>/locations", methods=["POST"])
def api_location_add(book_id: int):
    auth = require_admin_json()
    if auth is not True:
        return auth
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    try:
        location = locations_service.add_location(book_id, payload)
    except locations_service.LocationValidationError as exc:
        return json_error(str(exc), 400)
    except catalog_service.BookNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"location": location}), 201


@bp.route("/locations/<int:location_id>", methods=["DELETE"])
def api_location_delete(location_id: int):
    auth = require_admin_json()
    if auth is not True:
        return auth
    try:
        locations_service.delete_location(location_id)
    except locations_service.LocationNotFoundError as exc:
        return json_error(str(exc), 404)
    return jsonify({"status": "deleted", "id": location_id})


@bp.route("/<int:book_id>/locations/reorder", methods=["POST"])
def api_location_reorder(book_id: int):
    auth = require_admin_json()
    if auth is not True:
        return auth
    payload = json_body()
    if payload is None:
        return json_error("invalid_payload", 400)
    ids = payload.get("ids")
    if not isinstance(ids, list):
        return json_error("invalid_order", 400)
    try:
        locations = locations_service.reorder_locations(book_id, ids)
    except locations_service.LocationValidationError as exc:
        return json_error(str(exc), 400)
    return jsonify({"locations": locations})


@geo_bp.route("/search", methods=["GET"])
def api_geo_search():
    ok, data = geocoding_service.geocode(request.args.get("q", ""), request.args.get("lang", "ja"))
    if not ok:
        return upstream_error(data)
    return jsonify(data)


@geo_bp.route("/image", methods=["GET"])
def api_geo_image():
    ok, data = geocoding_service.fetch_location_image(
        request.args.get("title", ""), request.args.get("lang", "ja")
    )
    if not ok:
        return upstream_error(data)
    return jsonify(data)


def register_reader_blueprint(app):
    if not getattr(app, "_reader_bp", None):
        app.register_blueprint(bp)
        app.register_blueprint(geo_bp)
        setattr(app, "_reader_bp", bp)


__all__ = ["register_reader_blueprint", "bp", "geo_bp"]
