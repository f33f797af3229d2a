"""Eureka Library application package.

Flask JSON API over a SQLAlchemy store for the reading/social features:
bookshelf, serialized stories, vocabulary and story-location maps. Identity
is read from the hosting session; this package does not implement sign-in.
"""

__all__: list = []
