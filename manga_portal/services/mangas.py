"""
Сервис каталога: поиск манги, кэшируемые детали и создание администратором.
"""

from typing import Any, Dict, Optional, Sequence

from redis.asyncio import Redis
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.core.exceptions import (
    ChapterAlreadyExistsException,
    DatabaseException,
    MangaNotFoundException,
)
from manga_portal.core.logger_config import log_db_error, log_info, log_warning
from manga_portal.core.redis import delete_cache, get_cache, manga_cache_key, set_cache
from manga_portal.models.manga import Chapter, Manga
from manga_portal.repositories.manga_repository import MangaRepository
from manga_portal.schemas.manga import ChapterCreate, MangaCreate, MangaDetailResponse


async def get_manga_or_404(repository: MangaRepository, manga_id: int, with_details: bool = False) -> Manga:
    manga = await repository.get_by_id(manga_id, with_details=with_details)
    if manga is None:
        log_warning(f"Manga {manga_id} not found", {"manga_id": manga_id})
        raise MangaNotFoundException(message=f"Manga with id {manga_id} not found")
    return manga


async def invalidate_manga_cache(redis_client: Optional[Redis], manga_id: int) -> None:
    await delete_cache(redis_client, manga_cache_key(manga_id))


class MangaService:
    def __init__(self, db: AsyncSession, redis_client: Optional[Redis] = None):
        self.db = db
        self.redis = redis_client
        self.repository = MangaRepository(db)

    async def get_detail(self, manga_id: int) -> Dict[str, Any]:
        """
        Детальные данные манги в camelCase-формате ответа.

        Берутся из Redis, если закэшированы, иначе загружаются с жанрами и
        главами и записываются в кэш.

        Raises:
            MangaNotFoundException: Если манга не существует
        """
        cache_key = manga_cache_key(manga_id)
        cached = await get_cache(self.redis, cache_key)
        if cached is not None:
            return cached

        manga = await get_manga_or_404(self.repository, manga_id, with_details=True)
        payload = MangaDetailResponse.model_validate(manga).model_dump(mode="json", by_alias=True)
        await set_cache(self.redis, cache_key, payload)
        return payload

    async def list_mangas(self, q: Optional[str] = None, skip: int = 0, limit: int = 20) -> Sequence[Manga]:
        return await self.repository.search(q=q, skip=skip, limit=limit)

    async def create_manga(self, manga_data: MangaCreate) -> Manga:
        try:
            manga = await self.repository.create(manga_data)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            log_db_error(e, operation="create_manga", context={"title": manga_data.title})
            raise DatabaseException("Could not create the manga")

        log_info(f"Manga {manga.id} created", {"manga_id": manga.id, "title": manga.title})
        return await get_manga_or_404(self.repository, manga.id, with_details=True)

    async def add_chapter(self, manga_id: int, chapter_data: ChapterCreate) -> Chapter:
        """
        Добавляет главу к манге.

        Raises:
            MangaNotFoundException: Если манга не существует
            ChapterAlreadyExistsException: Если номер главы уже занят
        """
        await get_manga_or_404(self.repository, manga_id)
        duplicate = ChapterAlreadyExistsException(
            message=f"Chapter {chapter_data.number} already exists for manga {manga_id}",
            details={"manga_id": manga_id, "number": chapter_data.number},
        )
        if await self.repository.get_chapter(manga_id, chapter_data.number) is not None:
            raise duplicate

        try:
            chapter = await self.repository.add_chapter(manga_id, chapter_data)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise duplicate
        except SQLAlchemyError as e:
            await self.db.rollback()
            log_db_error(e, operation="add_chapter", context={"manga_id": manga_id})
            raise DatabaseException("Could not add the chapter")

        await invalidate_manga_cache(self.redis, manga_id)
        log_info(f"Chapter {chapter.number} added to manga {manga_id}", {"manga_id": manga_id, "chapter_id": chapter.id})
        return chapter
