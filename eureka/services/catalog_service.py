"""Book catalog: curated categories and the public-domain (Aozora) shelf."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from eureka.db.repositories import catalog_repo
from eureka.utils.logging import get_logger
from eureka.utils.text import clean_text

LOG = get_logger("catalog_service")


class BookNotFoundError(RuntimeError):
    """Raised when an Aozora book id does not exist."""


class CategoryNotFoundError(RuntimeError):
    """Raised for an unknown curated category key."""


class BookValidationError(ValueError):
    """Raised when a new Aozora book payload is invalid."""


def _book(book_id, title, author, cover_url, description, category):
    return {
        "id": book_id,
        "title": title,
        "author": author,
        "cover_url": cover_url,
        "description": description,
        "category": category,
        "isPublicDomain": False,
    }


_IMG = "https://m.media-amazon.com/images/I/"

CATEGORIES: Dict[str, Dict[str, Any]] = {
    "popular": {
        "title": "🔥 人気の日本文学",
        "books": [
            _book("pop-1", "こころ", "夏目漱石", _IMG + "91EyNHRJtZL._AC_UL480_FMwebp_QL65_.jpg",
                  "明治時代の日本を舞台に、友情と裏切り、愛と罪悪感を描いた名作", "popular"),
            _book("pop-2", "人間失格", "太宰治", _IMG + "81T0U8V-7FS._AC_UL480_FMwebp_QL65_.jpg",
                  "人間性を失っていく主人公の苦悩を描いた自伝的小説", "popular"),
            _book("pop-3", "坊っちゃん", "夏目漱石", "https://covers.openlibrary.org/b/id/12583098-L.jpg",
                  "江戸っ子気質の主人公が地方の中学校で巻き起こす騒動を描く", "popular"),
            _book("pop-4", "走れメロス", "太宰治", _IMG + "71iSzDd9HIL._AC_UL480_FMwebp_QL65_.jpg",
                  "友情と信頼をテーマにした短編小説の傑作", "popular"),
            _book("pop-5", "雪国", "川端康成", _IMG + "81y6Y+BiJIL._AC_UL480_FMwebp_QL65_.jpg",
                  "ノーベル賞作家による美しい日本の風景と人間模様", "popular"),
            _book("pop-6", "伊豆の踊子", "川端康成", _IMG + "61gtcnK18-L._AC_UL480_FMwebp_QL65_.jpg",
                  "旅芸人の踊子との淡い恋を描いた青春小説", "popular"),
        ],
    },
    "classics": {
        "title": "📚 日本文学の名作",
        "books": [
            _book("cls-1", "吾輩は猫である", "夏目漱石", _IMG + "71mrYjYkw7L._AC_UL480_FMwebp_QL65_.jpg",
                  "猫の視点から人間社会を風刺した長編小説", "classics"),
            _book("cls-2", "銀河鉄道の夜", "宮沢賢治", _IMG + "71hF1DDSHaL._AC_UL480_FMwebp_QL65_.jpg",
                  "少年ジョバンニの幻想的な銀河鉄道の旅を描いた童話", "classics"),
            _book("cls-3", "羅生門", "芥川龍之介", _IMG + "71G17az7Y-L._AC_UL480_FMwebp_QL65_.jpg",
                  "平安時代の羅生門を舞台に人間のエゴイズムを描く", "classics"),
            _book("cls-4", "蜘蛛の糸", "芥川龍之介", _IMG + "71MQHZ5F7aL._AC_UL480_FMwebp_QL65_.jpg",
                  "地獄に落ちた男が蜘蛛の糸を登ろうとする物語", "classics"),
            _book("cls-5", "舞姫", "森鴎外", _IMG + "513M3302GEL._AC_UL480_FMwebp_QL65_.jpg",
                  "ドイツ留学中の日本人青年の悲恋を描いた作品", "classics"),
            _book("cls-6", "山月記", "中島敦", _IMG + "71oAje5bxYL._AC_UL480_FMwebp_QL65_.jpg",
                  "詩人が虎に変身する中国の伝説を基にした短編", "classics"),
        ],
    },
    "mystery": {
        "title": "🕵️ ミステリー・推理小説",
        "books": [
            _book("mys-1", "十角館の殺人", "綾辻行人", _IMG + "81IJXzdIndL._AC_UL480_FMwebp_QL65_.jpg",
                  "孤島の館で起こる連続殺人事件", "mystery"),
            _book("mys-2", "容疑者Xの献身", "東野圭吾", _IMG + "71+DGasBeuL._AC_UL480_FMwebp_QL65_.jpg",
                  "天才数学者による完全犯罪の謎", "mystery"),
            _book("mys-3", "火車", "宮部みゆき", _IMG + "71x5jDZfNoL._AC_UL480_FMwebp_QL65_.jpg",
                  "失踪した女性の謎を追う社会派ミステリー", "mystery"),
        ],
    },
    "romance": {
        "title": "💖 恋愛・ロマンス",
        "books": [
            _book("rom-1", "君の名は。", "新海誠", _IMG + "71VsVSYmegL._AC_UL480_FMwebp_QL65_.jpg",
                  "時空を超えた二人の奇跡的な恋の物語", "romance"),
            _book("rom-2", "ナミヤ雑貨店の奇蹟", "東野圭吾", _IMG + "81WYIvrWsEL._AC_UL480_FMwebp_QL65_.jpg",
                  "時を超えた手紙が繋ぐ人々の想い", "romance"),
            _book("rom-3", "恋愛中毒", "山本文緒", _IMG + "614ueDxSvpL._AC_UL480_FMwebp_QL65_.jpg",
                  "愛に溺れる女性の心理を描いた恋愛小説", "romance"),
        ],
    },
    "scifi": {
        "title": "🚀 SF・ファンタジー",
        "books": [
            _book("sf-1", "新世界より", "貴志祐介", _IMG + "91AsNkqL7IL._AC_UL480_FMwebp_QL65_.jpg",
                  "千年後の日本を舞台にした壮大なSF", "scifi"),
            _book("sf-2", "虐殺器官", "伊藤計劃", _IMG + "81aSkGUDhxL._AC_UL480_FMwebp_QL65_.jpg",
                  "近未来の戦争と言語の謎を描くSFスリラー", "scifi"),
        ],
    },
}


def list_categories() -> List[Dict[str, Any]]:
    return [
        {"key": key, "title": data["title"], "books": [dict(b) for b in data["books"]]}
        for key, data in CATEGORIES.items()
    ]


def get_category(key: str) -> Dict[str, Any]:
    data = CATEGORIES.get(clean_text(key).lower())
    if not data:
        raise CategoryNotFoundError("category_not_found")
    return {"key": key.strip().lower(), "title": data["title"], "books": [dict(b) for b in data["books"]]}


def _aozora_card(book) -> Dict[str, Any]:
    return {
        "id": book.id,
        "title": book.title,
        "author": book.author,
        "cover_url": book.cover_url or "",
        "description": book.description or "",
        "isPublicDomain": bool(book.is_free),
    }


def list_aozora_books() -> List[Dict[str, Any]]:
    return [_aozora_card(b) for b in catalog_repo.list_aozora_books()]


def split_paragraphs(content: Optional[str]) -> List[str]:
    return [line for line in (content or "").split("\n") if line.strip()]


def get_aozora_book(book_id: int) -> Dict[str, Any]:
    book = catalog_repo.get_aozora_book(book_id)
    if not book:
        raise BookNotFoundError("book_not_found")
    payload = book.as_dict(include_content=True)
    payload["paragraphs"] = split_paragraphs(book.content)
    return payload


def create_aozora_book(
    title: str,
    author: str,
    content: str,
    *,
    cover_url: Optional[str] = None,
    description: Optional[str] = None,
    is_free: bool = True,
) -> Dict[str, Any]:
    title = clean_text(title)
    if not title:
        raise BookValidationError("title_required")
    book = catalog_repo.create_aozora_book(
        title,
        clean_text(author),
        content or "",
        cover_url=clean_text(cover_url) or None,
        description=clean_text(description) or None,
        is_free=bool(is_free),
    )
    LOG.info("Created aozora book id=%s title=%s", book.id, title)
    return book.as_dict()


__all__ = [
    "CATEGORIES",
    "BookNotFoundError",
    "CategoryNotFoundError",
    "BookValidationError",
    "list_categories",
    "get_category",
    "list_aozora_books",
    "split_paragraphs",
    "get_aozora_book",
    "create_aozora_book",
]
