"""Book discovery API: curated catalog, Aozora shelf and Google Books search."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from eureka.routes.common import int_arg, json_error, upstream_error
from eureka.services import book_search_service, catalog_service
from eureka.utils.logging import get_logger

LOG = get_logger("routes.books")

bp = Blueprint("books", __name__, url_prefix="/api/books")


@bp.route("/catalog", methods=["GET"])
def api_catalog():
    return jsonify({"categories": catalog_service.list_categories()})


@bp.route("/catalog/<string:key>", methods=["GET"])
def api_catalog_category(key: str):
    try:
        return jsonify(catalog_service.get_category(key))
    except catalog_service.CategoryNotFoundError as exc:
        return json_error(str(exc), 404)


@bp.route("/aozora", methods=["GET"])
def api_aozora_list():
    return jsonify({"books": catalog_service.list_aozora_books()})


@bp.route("/search", methods=["GET"])
def api_search():
    query = request.args.get("q", "")
    ok, data = book_search_service.search_books(
        query,
        start_index=int_arg("startIndex", 0),
        lang=request.args.get("lang", "ja"),
    )
    if not ok:
        LOG.info("Book search rejected code=%s", data.get("error"))
        return upstream_error(data)
    return jsonify(data)


def register_books_blueprint(app):
    if not getattr(app, "_books_bp", None):
        app.register_blueprint(bp)
        setattr(app, "_books_bp", bp)


__all__ = ["register_books_blueprint", "bp"]
