from .favorite_repository import FavoriteRepository
from .manga_repository import MangaRepository
from .rating_repository import RatingRepository

__all__ = ["FavoriteRepository", "MangaRepository", "RatingRepository"]
