"""
HTTP-клиент, через который страница манги обращается к JSON API.
"""

from typing import Any, Dict, Optional

import httpx
from fastapi import Request

from manga_portal.core.config import settings
from manga_portal.core.exceptions import PortalAPIException
from manga_portal.core.logger_config import logger


class MangaPortalAPI:
    """Асинхронный клиент JSON API Manga Portal.

    Используется как асинхронный контекстный менеджер: один короткоживущий
    ``httpx.AsyncClient`` на отрисовку страницы, без повторов.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        cookies: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.API_BASE_URL
        self.headers = headers or {}
        self.cookies = cookies or {}
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT_SECONDS
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            cookies=self.cookies,
            timeout=self.timeout,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.aclose()
            self.client = None

    async def _make_request(self, method: str, endpoint: str, **kwargs) -> Any:
        if not self.client:
            raise RuntimeError("API client not initialized. Use 'async with' context manager.")

        url = f"{settings.API_V1_STR}{endpoint}"
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.bind(method=method, url=url).error(f"Network error during API request: {e}")
            raise PortalAPIException(f"Network error: {e}", details={"endpoint": endpoint})

        if response.status_code >= 400:
            logger.bind(method=method, url=url, status_code=response.status_code).warning(
                f"API error {response.status_code} for {method} {endpoint}"
            )
            raise PortalAPIException(
                f"API error {response.status_code}",
                details={"endpoint": endpoint, "status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise PortalAPIException(f"Invalid JSON in API response: {e}", details={"endpoint": endpoint})

    async def get_manga(self, manga_id: int) -> Dict[str, Any]:
        """Детали манги в camelCase-формате."""
        return await self._make_request("GET", f"/mangas/{manga_id}")

    async def check_favorite(self, manga_id: int) -> Dict[str, Any]:
        """``{"isFavorite": bool}`` для аутентифицированного пользователя."""
        return await self._make_request("GET", f"/mangas/{manga_id}/favorite")


def get_portal_api(request: Request) -> MangaPortalAPI:
    """
    Зависимость FastAPI: клиент, действующий от имени зрителя.

    Bearer-токен и cookie зрителя пробрасываются, чтобы статус избранного
    определялся для того же пользователя, для которого строится страница.
    """
    headers = {}
    authorization = request.headers.get("authorization")
    if authorization:
        headers["Authorization"] = authorization
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers["X-Request-ID"] = request_id
    return MangaPortalAPI(headers=headers, cookies=dict(request.cookies))
