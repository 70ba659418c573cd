from .common import CamelModel
from .interactions import (
    FavoriteStatusResponse,
    FavoriteToggleResponse,
    RatingAggregateResponse,
    RatingAttributes,
    RatingRequest,
    RatingResponse,
)
from .manga import (
    ChapterCreate,
    ChapterResponse,
    GenreResponse,
    MangaCreate,
    MangaDetailResponse,
    MangaSummaryResponse,
)
from .user import UserCreate, UserRead, UserUpdate

__all__ = [
    "CamelModel",
    "ChapterCreate",
    "ChapterResponse",
    "FavoriteStatusResponse",
    "FavoriteToggleResponse",
    "GenreResponse",
    "MangaCreate",
    "MangaDetailResponse",
    "MangaSummaryResponse",
    "RatingAggregateResponse",
    "RatingAttributes",
    "RatingRequest",
    "RatingResponse",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
