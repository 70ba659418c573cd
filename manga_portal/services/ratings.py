"""
Сервис оценок.

Каждое изменение выполняется в одной транзакции: запись оценки и пересчёт
агрегатов манги коммитятся вместе, после чего манга перечитывается для ответа
``{rating, totalVotes}``.
"""

from typing import Any, Optional, Sequence

from redis.asyncio import Redis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.core.exceptions import DatabaseException, RatingNotFoundException
from manga_portal.core.logger_config import log_db_error, log_info, log_warning
from manga_portal.models.manga import Manga
from manga_portal.models.rating import Rating, validate_rating_value
from manga_portal.repositories.manga_repository import MangaRepository
from manga_portal.repositories.rating_repository import RatingRepository
from manga_portal.schemas.interactions import RatingAggregateResponse
from manga_portal.services.mangas import get_manga_or_404, invalidate_manga_cache


class RatingService:
    def __init__(self, db: AsyncSession, redis_client: Optional[Redis] = None):
        self.db = db
        self.redis = redis_client
        self.ratings = RatingRepository(db)
        self.mangas = MangaRepository(db)

    async def _get_own_rating(self, user_id: int, manga_id: int) -> Rating:
        rating = await self.ratings.get_for_user(user_id, manga_id)
        if rating is None:
            log_warning("Rating not found", {"user_id": user_id, "manga_id": manga_id})
            raise RatingNotFoundException(
                message=f"You have not rated manga {manga_id}",
                details={"manga_id": manga_id},
            )
        return rating

    async def _commit_and_reload(
        self, manga: Manga, manga_id: int, operation: str, context: dict
    ) -> RatingAggregateResponse:
        try:
            await self.ratings.refresh_aggregates(manga_id)
            await self.db.commit()
            await self.db.refresh(manga)
        except SQLAlchemyError as e:
            await self.db.rollback()
            log_db_error(e, operation=operation, context=context)
            raise DatabaseException("Could not save the rating")

        await invalidate_manga_cache(self.redis, manga_id)
        return RatingAggregateResponse(rating=manga.rating, total_votes=manga.total_votes)

    async def create(self, user_id: int, manga_id: int, raw_value: Any) -> RatingAggregateResponse:
        """
        Создаёт оценку пользователя для манги или перезаписывает существующую.

        Raises:
            MangaNotFoundException: Если манга не существует
            RatingValidationException: Если значение не целое число от 1 до 5
        """
        manga = await get_manga_or_404(self.mangas, manga_id)
        value = validate_rating_value(raw_value)
        context = {"user_id": user_id, "manga_id": manga_id, "value": value}

        try:
            await self.ratings.upsert(user_id, manga_id, value)
        except SQLAlchemyError as e:
            await self.db.rollback()
            log_db_error(e, operation="create_rating", context=context)
            raise DatabaseException("Could not save the rating")

        response = await self._commit_and_reload(manga, manga_id, "create_rating", context)
        log_info(f"User {user_id} rated manga {manga_id} with {value}", context)
        return response

    async def update(self, user_id: int, manga_id: int, raw_value: Any) -> RatingAggregateResponse:
        """
        Меняет значение существующей оценки пользователя. Голос не добавляется.

        Raises:
            MangaNotFoundException: Если манга не существует
            RatingNotFoundException: Если пользователь не оценивал мангу
            RatingValidationException: Если значение не целое число от 1 до 5
        """
        manga = await get_manga_or_404(self.mangas, manga_id)
        rating = await self._get_own_rating(user_id, manga_id)
        value = validate_rating_value(raw_value)
        context = {"user_id": user_id, "manga_id": manga_id, "rating_id": rating.id, "value": value}

        rating.value = value
        response = await self._commit_and_reload(manga, manga_id, "update_rating", context)
        log_info(f"User {user_id} changed rating of manga {manga_id} to {value}", context)
        return response

    async def destroy(self, user_id: int, manga_id: int) -> RatingAggregateResponse:
        manga = await get_manga_or_404(self.mangas, manga_id)
        rating = await self._get_own_rating(user_id, manga_id)
        context = {"user_id": user_id, "manga_id": manga_id, "rating_id": rating.id}

        try:
            await self.ratings.delete(rating)
        except SQLAlchemyError as e:
            await self.db.rollback()
            log_db_error(e, operation="delete_rating", context=context)
            raise DatabaseException("Could not delete the rating")

        response = await self._commit_and_reload(manga, manga_id, "delete_rating", context)
        log_info(f"User {user_id} removed rating of manga {manga_id}", context)
        return response

    async def list_for_user(
        self,
        user_id: int,
        min_rating: Optional[int] = None,
        max_rating: Optional[int] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Sequence[Rating]:
        return await self.ratings.list_for_user(user_id, min_rating, max_rating, skip, limit)
