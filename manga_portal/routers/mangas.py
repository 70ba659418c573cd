from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.core.auth import current_admin_user
from manga_portal.core.database import get_db
from manga_portal.core.redis import get_redis_client
from manga_portal.models.user import User
from manga_portal.schemas.manga import (
    ChapterCreate,
    ChapterResponse,
    MangaCreate,
    MangaDetailResponse,
    MangaSummaryResponse,
)
from manga_portal.services.mangas import MangaService

router = APIRouter(prefix="/mangas", tags=["mangas"])


def get_manga_service(
    db: AsyncSession = Depends(get_db),
    redis_client: Optional[Redis] = Depends(get_redis_client),
) -> MangaService:
    return MangaService(db, redis_client)


@router.get("", response_model=List[MangaSummaryResponse])
async def list_mangas(
    q: Optional[str] = Query(None, max_length=100, description="Search by title"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    service: MangaService = Depends(get_manga_service),
):
    return await service.list_mangas(q=q, skip=skip, limit=limit)


@router.get("/{manga_id}", response_model=MangaDetailResponse)
async def get_manga(manga_id: int, service: MangaService = Depends(get_manga_service)):
    """
    Детальная информация о манге с жанрами и главами.

    Args:
        manga_id: ID манги

    Returns:
        MangaDetailResponse: camelCase-данные для страницы манги

    Raises:
        MangaNotFoundException: Если манга не существует
    """
    return await service.get_detail(manga_id)


@router.post("", response_model=MangaDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_manga(
    manga_data: MangaCreate,
    current_user: User = Depends(current_admin_user),
    service: MangaService = Depends(get_manga_service),
):
    """
    Создаёт мангу (только администратор). Неизвестные жанры создаются.
    """
    return await service.create_manga(manga_data)


@router.post("/{manga_id}/chapters", response_model=ChapterResponse, status_code=status.HTTP_201_CREATED)
async def add_chapter(
    manga_id: int,
    chapter_data: ChapterCreate,
    current_user: User = Depends(current_admin_user),
    service: MangaService = Depends(get_manga_service),
):
    """
    Добавляет главу к манге (только администратор).

    Raises:
        MangaNotFoundException: Если манга не существует
        ChapterAlreadyExistsException: Если номер главы уже занят
    """
    return await service.add_chapter(manga_id, chapter_data)
