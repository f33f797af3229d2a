"""Tests for bookshelf_repo, vocabulary_repo and dictionary_repo."""
from __future__ import annotations

import pytest

from eureka.db.engine import init_engine_once, reset_for_tests
from eureka.db.repositories import bookshelf_repo, dictionary_repo, vocabulary_repo


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("EUREKA_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def test_entries_are_scoped_to_owner():
    entry = bookshelf_repo.create_entry("reader-1", title="こころ", author="夏目漱石", status="reading")
    bookshelf_repo.create_entry("reader-2", title="こころ", author="夏目漱石", status="read")

    assert bookshelf_repo.get_entry("reader-2", entry.id) is None
    assert bookshelf_repo.update_entry("reader-2", entry.id, {"status": "read"}) is None
    assert bookshelf_repo.delete_entry("reader-2", entry.id) is False
    assert bookshelf_repo.count_by_status("reader-1") == {"reading": 1}


def test_list_entries_filters_status():
    bookshelf_repo.create_entry("reader-1", title="A", author="", status="reading")
    bookshelf_repo.create_entry("reader-1", title="B", author="", status="read")

    assert [e.title for e in bookshelf_repo.list_entries("reader-1", "read")] == ["B"]
    assert [e.title for e in bookshelf_repo.list_entries("reader-1")] == ["B", "A"]


def test_vocabulary_unique_per_user():
    vocabulary_repo.create_entry("reader-1", "書生")
    vocabulary_repo.create_entry("reader-2", "書生")
    with pytest.raises(vocabulary_repo.VocabularyExistsError):
        vocabulary_repo.create_entry("reader-1", "書生")
    assert vocabulary_repo.count_entries("reader-1") == 1


def test_dictionary_search_and_duplicate():
    dictionary_repo.create_word("書生", "しょせい", old_meaning="住み込みの学生")
    dictionary_repo.create_word("ハイカラ", "はいから", modern_meaning="おしゃれ")

    assert [w.word for w in dictionary_repo.list_words("しょ")] == ["書生"]
    assert [w.word for w in dictionary_repo.list_words("おしゃれ")] == ["ハイカラ"]
    with pytest.raises(dictionary_repo.DictionaryWordExistsError):
        dictionary_repo.create_word("書生", "しょせい")
