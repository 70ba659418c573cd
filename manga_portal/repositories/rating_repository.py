from typing import Optional, Sequence

from loguru import logger
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.models.manga import Manga
from manga_portal.models.rating import Rating


class RatingRepository:
    """
    Доступ к данным оценок.

    Каждое изменение проходит через ``refresh_aggregates``, поэтому к моменту
    коммита ``Manga.rating`` и ``Manga.total_votes`` совпадают со строками
    ``ratings``.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_for_user(self, user_id: int, manga_id: int) -> Optional[Rating]:
        result = await self.db.execute(select(Rating).where(Rating.user_id == user_id, Rating.manga_id == manga_id))
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: int,
        min_rating: Optional[int] = None,
        max_rating: Optional[int] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> Sequence[Rating]:
        query = select(Rating).where(Rating.user_id == user_id)
        if min_rating is not None:
            query = query.where(Rating.value >= min_rating)
        if max_rating is not None:
            query = query.where(Rating.value <= max_rating)
        query = query.order_by(Rating.created_at.desc(), Rating.id.desc()).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def upsert(self, user_id: int, manga_id: int, value: int) -> Rating:
        """
        Находит или создаёт оценку пользователя для манги и задаёт значение.

        Одновременная вставка той же пары (пользователь, манга) нарушает
        уникальное ограничение: транзакция откатывается и обновляется уже
        записанная строка, побеждает последняя запись.

        Returns:
            Сохранённая оценка (после flush, без коммита)
        """
        rating = await self.get_for_user(user_id, manga_id)
        if rating is not None:
            rating.value = value
            await self.db.flush()
            return rating

        rating = Rating(user_id=user_id, manga_id=manga_id, value=value)
        self.db.add(rating)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            logger.bind(user_id=user_id, manga_id=manga_id).warning("Concurrent rating insert, updating existing row")
            rating = await self.get_for_user(user_id, manga_id)
            if rating is None:
                raise
            rating.value = value
            await self.db.flush()
        return rating

    async def delete(self, rating: Rating) -> None:
        await self.db.delete(rating)
        await self.db.flush()

    async def refresh_aggregates(self, manga_id: int) -> tuple[float, int]:
        """
        Пересчитывает средний рейтинг манги и число голосов по строкам оценок.

        Returns:
            (rating, total_votes); для манги без голосов (0.0, 0)
        """
        await self.db.flush()
        result = await self.db.execute(
            select(func.avg(Rating.value), func.count(Rating.id)).where(Rating.manga_id == manga_id)
        )
        average, total_votes = result.one()
        rating = round(float(average), 2) if average is not None else 0.0

        await self.db.execute(
            update(Manga).where(Manga.id == manga_id).values(rating=rating, total_votes=total_votes)
        )
        logger.debug(f"Manga {manga_id} aggregates: rating={rating}, total_votes={total_votes}")
        return rating, total_votes
