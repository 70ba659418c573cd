"""
Функции форматирования для страницы манги.

Все функции чистые: принимают camelCase-данные манги из API (или запасной
пример) и возвращают значения для отображения.
"""

import re
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

PLACEHOLDER_COVER = "/placeholder-manga.jpg"
MAX_STARS = 5
NO_TRANSLATION_TEAM = "Chưa có"

STATUS_LABELS = {
    "ongoing": "Đang tiến hành",
    "completed": "Hoàn thành",
    "hiatus": "Tạm ngưng",
}
UNKNOWN_STATUS_LABEL = "Đã hủy"

Number = Union[int, float]

_SLUG_STRIP = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")


def _round_half_up(value: Number, places: int) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def sort_chapters(chapters: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Главы от последней к первой."""
    return sorted(chapters or [], key=lambda chapter: chapter.get("number") or 0, reverse=True)


def _as_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def genre_name(genre: Any, index: int) -> str:
    """
    Отображаемое имя жанра.

    Жанр приходит строкой, числовым ID или объектом с ``name``/``title``/``id``;
    пустые записи получают имя по позиции.
    """
    if genre is None:
        return f"genre-{index}"
    if isinstance(genre, Mapping):
        name = genre.get("name") or genre.get("title") or genre.get("id") or index
        return _as_text(name)
    return _as_text(genre)


def genre_slug(genre: Any, index: int) -> str:
    """Slug для ссылки на жанр: ``"Super Power"`` -> ``"super-power"``."""
    slug = _SLUG_STRIP.sub("", genre_name(genre, index).lower())
    slug = _WHITESPACE.sub("-", slug)
    return slug or f"genre-{index}"


def format_view_count(views: Number) -> str:
    """Сокращённое число просмотров: ``1500000 -> "1.5M"``, ``1500 -> "2K"``, ``500 -> "500"``."""
    if views >= 1_000_000:
        return f"{_round_half_up(Decimal(views) / 1_000_000, 1)}M"
    if views >= 1_000:
        return f"{_round_half_up(Decimal(views) / 1_000, 0)}K"
    return str(views)


def format_chapter_views(views: Number) -> str:
    if views >= 1_000:
        return f"{_round_half_up(Decimal(views) / 1_000, 0)}K"
    return str(views)


def format_number(value: Optional[Number]) -> str:
    return f"{value or 0:,}"


def format_rating(rating: Optional[Number]) -> str:
    if not rating:
        return "0.0"
    return str(_round_half_up(rating, 1))


def rating_stars(rating: Optional[Number]) -> List[bool]:
    """Пять флагов: звезда закрашена, пока её позиция не больше рейтинга."""
    rating = rating or 0
    return [position <= rating for position in range(1, MAX_STARS + 1)]


def status_label(status: Optional[str]) -> str:
    return STATUS_LABELS.get(status or "", UNKNOWN_STATUS_LABEL)


def cover_url(manga: Mapping[str, Any]) -> str:
    if manga.get("coverImage"):
        return manga["coverImage"]
    cover = manga.get("cover_image")
    if isinstance(cover, Mapping) and cover.get("url"):
        return cover["url"]
    if isinstance(cover, str) and cover:
        return cover
    return PLACEHOLDER_COVER


def format_chapter_date(value: Optional[str]) -> str:
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%d/%m/%Y")
    except ValueError:
        return value


def build_manga_view(manga: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Всё, что выводит шаблон страницы, по данным одной манги.
    """
    chapters = sort_chapters(manga.get("chapters"))
    view_count = manga.get("viewCount")
    rating = manga.get("rating") or 0

    return {
        "id": manga.get("id"),
        "title": manga.get("title", ""),
        "description": manga.get("description") or "",
        "cover_url": cover_url(manga),
        "author": manga.get("author") or "",
        "artist": manga.get("artist"),
        "release_year": manga.get("releaseYear"),
        "status": manga.get("status"),
        "status_label": status_label(manga.get("status")) if manga.get("status") else None,
        "translation_team": manga.get("translationTeam") or NO_TRANSLATION_TEAM,
        "view_count": format_number(view_count),
        "view_badge": format_view_count(view_count) if view_count else None,
        "rating": rating,
        "rating_text": format_rating(rating),
        "stars": rating_stars(rating),
        "total_votes": manga.get("totalVotes") or 0,
        "genres": [
            {"name": genre_name(genre, index), "slug": genre_slug(genre, index)}
            for index, genre in enumerate(manga.get("genres") or [])
        ],
        "chapters": [
            {
                "id": chapter.get("id"),
                "number": chapter.get("number"),
                "title": chapter.get("title"),
                "views": format_chapter_views(chapter["viewCount"]) if chapter.get("viewCount") else None,
                "date": format_chapter_date(chapter.get("createdAt")),
            }
            for chapter in chapters
        ],
        "chapter_count": len(chapters),
        "first_chapter_id": (chapters[-1].get("id") if chapters else None) or 1,
        "latest_chapter_id": (chapters[0].get("id") if chapters else None) or 1,
    }
