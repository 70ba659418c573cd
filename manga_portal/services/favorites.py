from typing import Sequence, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.core.exceptions import DatabaseException
from manga_portal.core.logger_config import log_db_error, log_info
from manga_portal.models.manga import Manga
from manga_portal.repositories.favorite_repository import FavoriteRepository
from manga_portal.repositories.manga_repository import MangaRepository
from manga_portal.services.mangas import get_manga_or_404

ADDED = "added"
REMOVED = "removed"


class FavoriteService:
    """Избранная манга пользователей."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.favorites = FavoriteRepository(db)
        self.mangas = MangaRepository(db)

    async def is_favorite(self, user_id: int, manga_id: int) -> bool:
        await get_manga_or_404(self.mangas, manga_id)
        return await self.favorites.get(user_id, manga_id) is not None

    async def toggle(self, user_id: int, manga_id: int) -> Tuple[bool, str]:
        """
        Добавляет мангу в избранное пользователя или убирает, если она уже там.

        Returns:
            (is_favorite, status), где status равен "added" или "removed"
        """
        await get_manga_or_404(self.mangas, manga_id)
        context = {"user_id": user_id, "manga_id": manga_id}

        try:
            favorite = await self.favorites.get(user_id, manga_id)
            if favorite is None:
                await self.favorites.add(user_id, manga_id)
                result = (True, ADDED)
            else:
                await self.favorites.remove(favorite)
                result = (False, REMOVED)
            await self.db.commit()
        except IntegrityError:
            # Уже добавлено параллельным запросом
            await self.db.rollback()
            result = (True, ADDED)
        except SQLAlchemyError as e:
            await self.db.rollback()
            log_db_error(e, operation="toggle_favorite", context=context)
            raise DatabaseException("Could not update favorites")

        log_info(f"Manga {manga_id} {result[1]} to favorites of user {user_id}", context)
        return result

    async def list_favorites(self, user_id: int, skip: int = 0, limit: int = 20) -> Sequence[Manga]:
        return await self.favorites.list_mangas(user_id, skip=skip, limit=limit)
