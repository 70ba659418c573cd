from typing import Optional, Sequence

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from manga_portal.models.manga import Chapter, Genre, Manga
from manga_portal.schemas.manga import ChapterCreate, MangaCreate


class MangaRepository:
    """
    Доступ к данным манги, её жанров и глав.

    Репозиторий никогда не коммитит, транзакцией управляет вызывающий сервис.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def get_by_id(self, manga_id: int, with_details: bool = False) -> Optional[Manga]:
        """
        Получает мангу по ID.

        Args:
            manga_id: ID манги
            with_details: Сразу загрузить жанры и главы

        Returns:
            Манга или None, если её нет
        """
        query = select(Manga).where(Manga.id == manga_id)
        if with_details:
            query = query.options(selectinload(Manga.genres), selectinload(Manga.chapters)).execution_options(
                populate_existing=True
            )
        result = await self.db.execute(query)
        manga = result.scalar_one_or_none()
        if manga is None:
            logger.debug(f"Manga with id={manga_id} not found")
        return manga

    async def search(self, q: Optional[str] = None, skip: int = 0, limit: int = 20) -> Sequence[Manga]:
        query = select(Manga)
        if q:
            query = query.where(func.lower(Manga.title).contains(q.lower()))
        query = query.order_by(Manga.updated_at.desc(), Manga.id.desc()).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def get_or_create_genres(self, names: Sequence[str]) -> list[Genre]:
        if not names:
            return []

        result = await self.db.execute(select(Genre).where(Genre.name.in_(names)))
        existing = {genre.name: genre for genre in result.scalars().all()}

        genres = []
        for name in names:
            genre = existing.get(name)
            if genre is None:
                genre = Genre(name=name)
                self.db.add(genre)
                logger.debug(f"Creating genre '{name}'")
            genres.append(genre)
        return genres

    async def create(self, manga_data: MangaCreate) -> Manga:
        genres = await self.get_or_create_genres(manga_data.genres)
        manga = Manga(**manga_data.model_dump(exclude={"genres"}), genres=genres)
        self.db.add(manga)
        await self.db.flush()
        return manga

    async def get_chapter(self, manga_id: int, number: int) -> Optional[Chapter]:
        result = await self.db.execute(
            select(Chapter).where(Chapter.manga_id == manga_id, Chapter.number == number)
        )
        return result.scalar_one_or_none()

    async def add_chapter(self, manga_id: int, chapter_data: ChapterCreate) -> Chapter:
        chapter = Chapter(manga_id=manga_id, **chapter_data.model_dump())
        self.db.add(chapter)
        await self.db.flush()
        return chapter
