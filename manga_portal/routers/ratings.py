from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.core.auth import current_active_user
from manga_portal.core.database import get_db
from manga_portal.core.logger_config import log_info
from manga_portal.core.redis import get_redis_client
from manga_portal.models.rating import MAX_RATING, MIN_RATING
from manga_portal.models.user import User
from manga_portal.schemas.interactions import RatingAggregateResponse, RatingRequest, RatingResponse
from manga_portal.services.ratings import RatingService

router = APIRouter(prefix="/mangas/{manga_id}/ratings", tags=["ratings"])
me_router = APIRouter(prefix="/users/me", tags=["ratings"])

ERROR_RESPONSES = {
    status.HTTP_401_UNAUTHORIZED: {"description": "Not authenticated"},
    status.HTTP_404_NOT_FOUND: {"description": "Manga or rating not found"},
    422: {"description": 'Invalid rating: {"errors": {"value": [...]}}'},
}


def get_rating_service(
    db: AsyncSession = Depends(get_db),
    redis_client: Optional[Redis] = Depends(get_redis_client),
) -> RatingService:
    return RatingService(db, redis_client)


@router.post("", response_model=RatingAggregateResponse, responses=ERROR_RESPONSES)
async def create_rating(
    manga_id: int,
    rating_data: RatingRequest,
    current_user: User = Depends(current_active_user),
    service: RatingService = Depends(get_rating_service),
):
    """
    Оценить мангу.

    Создаёт оценку текущего пользователя или перезаписывает её, если
    пользователь уже оценивал эту мангу.

    Args:
        manga_id: ID манги
        rating_data: ``{"rating": {"rating": <1..5>}}``

    Returns:
        RatingAggregateResponse: Пересчитанные ``rating`` и ``totalVotes`` манги

    Raises:
        MangaNotFoundException: Если манга не существует
        RatingValidationException: Если значение не целое число от 1 до 5
    """
    user_id = current_user.id
    log_info(f"User {user_id} rating manga {manga_id}", {"user_id": user_id, "manga_id": manga_id})
    return await service.create(user_id, manga_id, rating_data.rating.rating)


@router.api_route(
    "/{rating_id}",
    methods=["PUT", "PATCH"],
    response_model=RatingAggregateResponse,
    responses=ERROR_RESPONSES,
)
async def update_rating(
    manga_id: int,
    rating_id: int,
    rating_data: RatingRequest,
    current_user: User = Depends(current_active_user),
    service: RatingService = Depends(get_rating_service),
):
    """
    Изменить оценку манги текущим пользователем.

    Оценка ищется по паре (пользователь, манга), ``rating_id`` лишь
    дополняет путь ресурса.

    Raises:
        MangaNotFoundException: Если манга не существует
        RatingNotFoundException: Если пользователь не оценивал мангу
        RatingValidationException: Если значение не целое число от 1 до 5
    """
    user_id = current_user.id
    log_info(
        f"User {user_id} updating rating of manga {manga_id}",
        {"user_id": user_id, "manga_id": manga_id, "rating_id": rating_id},
    )
    return await service.update(user_id, manga_id, rating_data.rating.rating)


@router.delete("/{rating_id}", response_model=RatingAggregateResponse, responses=ERROR_RESPONSES)
async def delete_rating(
    manga_id: int,
    rating_id: int,
    current_user: User = Depends(current_active_user),
    service: RatingService = Depends(get_rating_service),
):
    """
    Удалить оценку манги текущим пользователем.

    Raises:
        MangaNotFoundException: Если манга не существует
        RatingNotFoundException: Если пользователь не оценивал мангу
    """
    user_id = current_user.id
    log_info(
        f"User {user_id} deleting rating of manga {manga_id}",
        {"user_id": user_id, "manga_id": manga_id, "rating_id": rating_id},
    )
    return await service.destroy(user_id, manga_id)


@me_router.get("/ratings", response_model=List[RatingResponse])
async def get_my_ratings(
    min_rating: Optional[int] = Query(None, ge=MIN_RATING, le=MAX_RATING, description="Lowest value to include"),
    max_rating: Optional[int] = Query(None, ge=MIN_RATING, le=MAX_RATING, description="Highest value to include"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(current_active_user),
    service: RatingService = Depends(get_rating_service),
):
    """
    Оценки текущего пользователя, сначала новые.
    """
    return await service.list_for_user(current_user.id, min_rating, max_rating, skip, limit)
