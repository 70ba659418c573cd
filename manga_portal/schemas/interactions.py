from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from .common import CamelModel


class RatingAttributes(BaseModel):
    """
    Вложенный объект ``rating`` запроса оценки.

    Значение валидируется на уровне модели, чтобы любая ошибка приходила в
    формате ``{"errors": ...}``.
    """

    rating: Any = Field(None, description="Score from 1 to 5")


class RatingRequest(BaseModel):
    """
    Тело запросов создания и изменения оценки: ``{"rating": {"rating": 4}}``.
    """

    rating: RatingAttributes


class RatingAggregateResponse(CamelModel):
    """
    Агрегаты манги, возвращаемые после каждого изменения оценки.
    """

    rating: float
    total_votes: int


class RatingResponse(CamelModel):
    """
    Одна из оценок текущего пользователя.
    """

    id: int
    manga_id: int
    value: int
    created_at: datetime
    updated_at: datetime


class FavoriteStatusResponse(CamelModel):
    is_favorite: bool


class FavoriteToggleResponse(FavoriteStatusResponse):
    status: Literal["added", "removed"]
