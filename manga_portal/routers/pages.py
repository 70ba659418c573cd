"""
Страницы, отрисовываемые на сервере.
"""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from manga_portal.core.auth import current_optional_user
from manga_portal.core.config import settings
from manga_portal.core.exceptions import PortalAPIException
from manga_portal.core.logger_config import log_warning
from manga_portal.models.user import User
from manga_portal.web.api_client import MangaPortalAPI, get_portal_api
from manga_portal.web.mock_data import mock_manga
from manga_portal.web.presentation import build_manga_view

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "web" / "templates"

FETCH_ERROR_MESSAGE = "Không thể tải thông tin truyện. Vui lòng thử lại sau."
LOGIN_REQUIRED_MESSAGE = "Vui lòng đăng nhập để thêm truyện vào danh sách yêu thích"
ACTION_FAILED_MESSAGE = "Không thể thực hiện. Vui lòng thử lại sau."

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["pages"])


@router.get("/manga/{manga_id}", response_class=HTMLResponse)
async def manga_detail_page(
    request: Request,
    manga_id: int,
    api: MangaPortalAPI = Depends(get_portal_api),
    current_user: Optional[User] = Depends(current_optional_user),
):
    """
    Страница манги.

    Манга загружается через JSON API. Если запрос не удался, страница
    показывает баннер с ошибкой и встроенный пример вместо пустой страницы.
    Статус избранного проверяется только для вошедших пользователей и при
    ошибке считается "не в избранном".
    """
    error: Optional[str] = None
    is_favorite = False
    is_authenticated = current_user is not None

    async with api:
        try:
            manga = await api.get_manga(manga_id)
        except PortalAPIException as e:
            log_warning(f"Failed to fetch manga {manga_id}: {e}", {"manga_id": manga_id})
            error = FETCH_ERROR_MESSAGE
            manga = mock_manga(manga_id)
        else:
            if is_authenticated:
                try:
                    favorite = await api.check_favorite(manga_id)
                    is_favorite = bool(favorite.get("isFavorite"))
                except PortalAPIException as e:
                    log_warning(f"Failed to check favorite status: {e}", {"manga_id": manga_id})

    return templates.TemplateResponse(
        request,
        "manga_detail.html",
        {
            "manga": build_manga_view(manga),
            "error": error,
            "is_favorite": is_favorite,
            "is_authenticated": is_authenticated,
            "api_prefix": settings.API_V1_STR,
            "messages": {
                "login_required": LOGIN_REQUIRED_MESSAGE,
                "action_failed": ACTION_FAILED_MESSAGE,
            },
        },
    )
