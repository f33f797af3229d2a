"""Tests for catalog_repo (Aozora books and ordered locations)."""
from __future__ import annotations

import pytest

from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.db.repositories import catalog_repo


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("EUREKA_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_list_aozora_books_newest_first():
    first = catalog_repo.create_aozora_book("羅生門", "芥川龍之介", "本文")
    second = catalog_repo.create_aozora_book("こころ", "夏目漱石", "本文")

    ids = [b.id for b in catalog_repo.list_aozora_books()]

    assert ids == [second.id, first.id]
    assert catalog_repo.find_aozora_book("こころ", "夏目漱石").id == second.id
    assert catalog_repo.find_aozora_book("こころ", "別人") is None


def test_create_location_appends_order_index():
    book = catalog_repo.create_aozora_book("坊っちゃん", "夏目漱石", "本文")
    a = catalog_repo.create_location(book.id, "東京", 35.68, 139.76)
    b = catalog_repo.create_location(book.id, "松山", 33.84, 132.77)

    assert (a.order_index, b.order_index) == (0, 1)
    assert [loc.location_name for loc in catalog_repo.list_locations(book.id)] == ["東京", "松山"]


def test_reorder_and_delete_locations():
    book = catalog_repo.create_aozora_book("坊っちゃん", "夏目漱石", "本文")
    a = catalog_repo.create_location(book.id, "東京", 35.68, 139.76)
    b = catalog_repo.create_location(book.id, "松山", 33.84, 132.77)
    c = catalog_repo.create_location(book.id, "道後", 33.85, 132.79)

    reordered = catalog_repo.reorder_locations(book.id, [c.id, a.id, b.id])

    assert [loc.id for loc in reordered] == [c.id, a.id, b.id]
    assert [loc.id for loc in catalog_repo.list_locations(book.id)] == [c.id, a.id, b.id]
    assert catalog_repo.delete_location(a.id) is True
    assert catalog_repo.delete_location(a.id) is False
    assert catalog_repo.get_location(a.id) is None
