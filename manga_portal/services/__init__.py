from .favorites import FavoriteService
from .mangas import MangaService
from .ratings import RatingService

__all__ = ["FavoriteService", "MangaService", "RatingService"]
