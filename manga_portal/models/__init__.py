"""
Модели базы данных Manga Portal.

Импорт пакета регистрирует все таблицы в ``Base.metadata``.
"""

from .base import Base
from .favorite import Favorite
from .manga import Chapter, Genre, Manga, MangaStatus, manga_genres
from .rating import MAX_RATING, MIN_RATING, Rating, validate_rating_value
from .user import User, UserRole

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Manga",
    "MangaStatus",
    "Genre",
    "Chapter",
    "Rating",
    "Favorite",
    "manga_genres",
    "MIN_RATING",
    "MAX_RATING",
    "validate_rating_value",
]
