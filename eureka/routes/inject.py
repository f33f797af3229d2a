"""Route registration.

Called from startup wiring to register every JSON blueprint on the app.
"""
from __future__ import annotations
from typing import Any

from .admin_dictionary import register_dictionary_admin_blueprint
from .authors import register_authors_blueprint
from .books import register_books_blueprint
from .bookshelf import register_bookshelf_blueprint
from .health import register_health
from .language_switch import register_language_switch
from .profile import register_profile_blueprint
from .reader import register_reader_blueprint
from .stories import register_stories_blueprint
from .vocabulary import register_vocabulary_blueprint


def register_all(app: Any) -> None:
    register_health(app)
    register_language_switch(app)
    register_books_blueprint(app)
    register_bookshelf_blueprint(app)
    register_reader_blueprint(app)
    register_vocabulary_blueprint(app)
    register_stories_blueprint(app)
    register_authors_blueprint(app)
    register_profile_blueprint(app)
    register_dictionary_admin_blueprint(app)


__all__ = ["register_all"]
