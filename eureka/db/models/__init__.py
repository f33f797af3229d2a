"""ORM models aggregate exports."""
from .library import (  # noqa: F401
    Base,
    utcnow,
    load_json_list,
    dump_json_list,
    Profile,
    AozoraBook,
    BookLocation,
    BookshelfEntry,
    DictionaryWord,
    VocabularyEntry,
)
from .stories import (  # noqa: F401
    UserStory,
    StoryChapter,
    StoryLike,
    StoryBookmark,
    StoryComment,
    AuthorFollow,
)

__all__ = [
    "Base",
    "utcnow",
    "load_json_list",
    "dump_json_list",
    "Profile",
    "AozoraBook",
    "BookLocation",
    "BookshelfEntry",
    "DictionaryWord",
    "VocabularyEntry",
    "UserStory",
    "StoryChapter",
    "StoryLike",
    "StoryBookmark",
    "StoryComment",
    "AuthorFollow",
]
