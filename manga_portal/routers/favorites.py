from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.core.auth import current_active_user
from manga_portal.core.database import get_db
from manga_portal.models.user import User
from manga_portal.schemas.interactions import FavoriteStatusResponse, FavoriteToggleResponse
from manga_portal.schemas.manga import MangaSummaryResponse
from manga_portal.services.favorites import FavoriteService

router = APIRouter(tags=["favorites"])


def get_favorite_service(db: AsyncSession = Depends(get_db)) -> FavoriteService:
    return FavoriteService(db)


@router.get("/mangas/{manga_id}/favorite", response_model=FavoriteStatusResponse)
async def check_favorite(
    manga_id: int,
    current_user: User = Depends(current_active_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    Есть ли манга в избранном текущего пользователя.

    Raises:
        MangaNotFoundException: Если манга не существует
    """
    return FavoriteStatusResponse(is_favorite=await service.is_favorite(current_user.id, manga_id))


@router.post("/users/favorites/{manga_id}/toggle", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    manga_id: int,
    current_user: User = Depends(current_active_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    """
    Добавляет мангу в избранное текущего пользователя или убирает её оттуда.

    Returns:
        FavoriteToggleResponse: Новое состояние и ``"added"`` / ``"removed"``
    """
    is_favorite, status = await service.toggle(current_user.id, manga_id)
    return FavoriteToggleResponse(is_favorite=is_favorite, status=status)


@router.get("/users/me/favorites", response_model=List[MangaSummaryResponse])
async def get_my_favorites(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(current_active_user),
    service: FavoriteService = Depends(get_favorite_service),
):
    return await service.list_favorites(current_user.id, skip=skip, limit=limit)
