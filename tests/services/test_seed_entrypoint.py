"""Tests for the JSON seeding entrypoint."""
from __future__ import annotations

import json

import pytest

from entrypoint import seed
from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.services import catalog_service, dictionary_service, locations_service


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("EUREKA_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_default_seed_is_idempotent(capsys):
    assert seed.main([]) == 0
    first = capsys.readouterr().out
    assert "[SEED] books ok created=2 existing=0 locations=3" in first
    assert "[SEED] dictionary ok created=5 existing=0" in first

    assert seed.main([]) == 0
    second = capsys.readouterr().out
    assert "[SEED] books ok created=0 existing=2 locations=0" in second
    assert "[SEED] dictionary ok created=0 existing=5" in second

    books = catalog_service.list_aozora_books()
    assert {b["title"] for b in books} == {"坊っちゃん", "走れメロス"}
    botchan = next(b for b in books if b["title"] == "坊っちゃん")
    route = locations_service.route_summary(botchan["id"])
    assert route["start_name"] == "東京"
    assert route["end_name"] == "松山中学校"
    assert dictionary_service.lookup_word("ハイカラ")["found"] is True


def test_bad_entries_fail_the_step(tmp_path, capsys):
    path = tmp_path / "seed.json"
    path.write_text(
        json.dumps({"books": [], "dictionary": [{"word": "汽車"}]}, ensure_ascii=False),
        encoding="utf-8",
    )

    assert seed.main(["--file", str(path)]) == 3
    err = capsys.readouterr().err
    assert "[SEED] dictionary ERROR reading_required" in err


def test_missing_file(tmp_path, capsys):
    assert seed.main(["--file", str(tmp_path / "absent.json")]) == 3
    assert "[SEED] load ERROR" in capsys.readouterr().err
