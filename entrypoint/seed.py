#!/usr/bin/env python3
"""Seeding orchestrator.

Loads Aozora books (with their story locations) and dictionary words from a
JSON file in an idempotent order, producing one summary line per step.

Exit Codes:
  0 = all ok / or already present
  3 = one or more seed steps failed (non-fatal for manual invocation)
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from typing import Any, Dict, List

DEFAULT_SEED_FILE = Path(__file__).resolve().with_name("seed_data.json")


def load_seed_file(path: Path) -> Dict[str, Any]:
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError("seed file must contain a JSON object")
    return data


def seed_books(books: List[Dict[str, Any]]) -> Dict[str, int]:
    from eureka.db.repositories import catalog_repo
    from eureka.services import catalog_service, locations_service

    summary = {"created": 0, "existing": 0, "locations": 0}
    for item in books:
        title = (item.get("title") or "").strip()
        author = (item.get("author") or "").strip()
        existing = catalog_repo.find_aozora_book(title, author)
        if existing:
            summary["existing"] += 1
            book_id = existing.id
        else:
            created = catalog_service.create_aozora_book(
                title,
                author,
                item.get("content") or "",
                cover_url=item.get("cover_url"),
                description=item.get("description"),
                is_free=item.get("is_free", True),
            )
            summary["created"] += 1
            book_id = created["id"]
        if catalog_repo.list_locations(book_id):
            continue
        for loc in item.get("locations") or []:
            locations_service.add_location(book_id, loc)
            summary["locations"] += 1
    return summary


def seed_dictionary(words: List[Dict[str, Any]]) -> Dict[str, int]:
    from eureka.db.repositories import dictionary_repo
    from eureka.services import dictionary_service

    summary = {"created": 0, "existing": 0}
    for item in words:
        if dictionary_repo.get_by_word((item.get("word") or "").strip()):
            summary["existing"] += 1
            continue
        dictionary_service.create_word(item)
        summary["created"] += 1
    return summary


def _run_step(name: str, func, payload) -> bool:
    try:
        summary = func(payload)
    except (ValueError, RuntimeError, OSError) as exc:
        print(f"[SEED] {name} ERROR {exc}", file=sys.stderr)
        return False
    details = " ".join(f"{k}={v}" for k, v in summary.items())
    print(f"[SEED] {name} ok {details}")
    return True


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed Eureka Library reference data.")
    parser.add_argument("--file", default=str(DEFAULT_SEED_FILE), help="JSON seed file")
    args = parser.parse_args(argv)

    from eureka.db import init_engine_once

    try:
        data = load_seed_file(Path(args.file))
    except (OSError, ValueError) as exc:
        print(f"[SEED] load ERROR {exc}", file=sys.stderr)
        return 3
    init_engine_once()
    ok_books = _run_step("books", seed_books, data.get("books") or [])
    ok_words = _run_step("dictionary", seed_dictionary, data.get("dictionary") or [])
    return 0 if (ok_books and ok_words) else 3


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
