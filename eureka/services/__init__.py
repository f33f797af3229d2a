"""Service layer: business rules over repositories and external APIs."""

from . import (  # noqa: F401
    profiles_service,
    avatar_service,
    catalog_service,
    book_search_service,
    bookshelf_service,
    dictionary_service,
    vocabulary_service,
    locations_service,
    geocoding_service,
    stories_service,
    social_service,
    authors_service,
)

__all__ = [
    "profiles_service",
    "avatar_service",
    "catalog_service",
    "book_search_service",
    "bookshelf_service",
    "dictionary_service",
    "vocabulary_service",
    "locations_service",
    "geocoding_service",
    "stories_service",
    "social_service",
    "authors_service",
]
