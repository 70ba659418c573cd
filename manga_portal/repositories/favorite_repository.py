from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.models.favorite import Favorite
from manga_portal.models.manga import Manga


class FavoriteRepository:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get(self, user_id: int, manga_id: int) -> Optional[Favorite]:
        result = await self.db.execute(
            select(Favorite).where(Favorite.user_id == user_id, Favorite.manga_id == manga_id)
        )
        return result.scalar_one_or_none()

    async def add(self, user_id: int, manga_id: int) -> Favorite:
        favorite = Favorite(user_id=user_id, manga_id=manga_id)
        self.db.add(favorite)
        await self.db.flush()
        return favorite

    async def remove(self, favorite: Favorite) -> None:
        await self.db.delete(favorite)
        await self.db.flush()

    async def list_mangas(self, user_id: int, skip: int = 0, limit: int = 20) -> Sequence[Manga]:
        """
        Избранная манга пользователя, сначала добавленная последней.
        """
        query = (
            select(Manga)
            .join(Favorite, Favorite.manga_id == Manga.id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return result.scalars().all()
