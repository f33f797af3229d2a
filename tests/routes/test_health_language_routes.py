"""Health check, locale selection and language switch."""
from __future__ import annotations

import pytest
from flask import jsonify
from flask_babel import get_locale

from eureka import config as app_config
from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.i18n.preferences import SESSION_LOCALE_KEY
from eureka.startup.wiring import create_app


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("EUREKA_DB_PATH", ":memory:")
    monkeypatch.delenv("EUREKA_DEFAULT_LOCALE", raising=False)
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def flask_app():
    app = create_app({"TESTING": True, "SECRET_KEY": "locale-test-secret"})

    @app.route("/locale")
    def show_locale():
        return jsonify({"locale": str(get_locale())})

    return app


def test_healthz(flask_app):
    resp = flask_app.test_client().get("/healthz")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "db": True, "version": app_config.APP_VERSION}


def test_default_locale_is_japanese(flask_app):
    assert flask_app.test_client().get("/locale").get_json()["locale"] == "ja"


def test_accept_language_used_without_session(flask_app):
    resp = flask_app.test_client().get("/locale", headers={"Accept-Language": "en-US,en;q=0.9"})
    assert resp.get_json()["locale"] == "en"


def test_language_switch_scoped_per_client(flask_app):
    client_one = flask_app.test_client()
    client_two = flask_app.test_client()

    resp = client_one.post("/language/switch", json={"language": "EN"})
    assert resp.status_code == 200
    assert resp.get_json() == {"language": "en"}
    with client_one.session_transaction() as sess:
        assert sess[SESSION_LOCALE_KEY] == "en"

    assert client_one.get("/locale").get_json()["locale"] == "en"
    assert client_two.get("/locale").get_json()["locale"] == "ja"


def test_language_switch_rejects_unknown(flask_app):
    resp = flask_app.test_client().post("/language/switch", json={"language": "lv"})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "unsupported_language"
    assert body["details"] == {"supported": ["ja", "en"]}
