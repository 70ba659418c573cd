"""
Модульные тесты серверного клиента API
"""

import httpx
import pytest

from manga_portal.core.exceptions import PortalAPIException
from manga_portal.web.api_client import MangaPortalAPI

pytestmark = pytest.mark.asyncio


def make_api(handler, **kwargs) -> MangaPortalAPI:
    return MangaPortalAPI(base_url="http://api.test", transport=httpx.MockTransport(handler), **kwargs)


async def test_get_manga_returns_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        return httpx.Response(200, json={"id": 5, "title": "Vagabond"})

    async with make_api(handler) as api:
        manga = await api.get_manga(5)

    assert manga == {"id": 5, "title": "Vagabond"}
    assert seen == {"method": "GET", "path": "/api/v1/mangas/5"}


async def test_viewer_credentials_are_forwarded():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["authorization"] = request.headers.get("authorization")
        seen["cookie"] = request.headers.get("cookie")
        return httpx.Response(200, json={"isFavorite": True})

    api = make_api(handler, headers={"Authorization": "Bearer abc"}, cookies={"manga_portal_auth": "xyz"})
    async with api:
        result = await api.check_favorite(5)

    assert result == {"isFavorite": True}
    assert seen["authorization"] == "Bearer abc"
    assert seen["cookie"] == "manga_portal_auth=xyz"


@pytest.mark.parametrize("status_code", [401, 404, 500])
async def test_error_status_raises(status_code):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"detail": "nope"})

    async with make_api(handler) as api:
        with pytest.raises(PortalAPIException) as exc_info:
            await api.get_manga(1)

    assert exc_info.value.details["status_code"] == status_code


async def test_network_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_api(handler) as api:
        with pytest.raises(PortalAPIException, match="Network error"):
            await api.get_manga(1)


async def test_invalid_json_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>not json</html>")

    async with make_api(handler) as api:
        with pytest.raises(PortalAPIException, match="Invalid JSON"):
            await api.get_manga(1)


async def test_client_requires_context_manager():
    api = make_api(lambda request: httpx.Response(200, json={}))
    with pytest.raises(RuntimeError):
        await api.get_manga(1)
