"""
Интеграционные тесты избранного
"""

import pytest
from httpx import AsyncClient

from ..utils import API

pytestmark = [pytest.mark.asyncio, pytest.mark.integration]


async def test_toggle_favorite(async_client: AsyncClient, auth_headers, test_manga):
    url = f"{API}/users/favorites/{test_manga.id}/toggle"

    response = await async_client.get(f"{API}/mangas/{test_manga.id}/favorite", headers=auth_headers)
    assert response.json() == {"isFavorite": False}

    response = await async_client.post(url, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"isFavorite": True, "status": "added"}

    response = await async_client.get(f"{API}/mangas/{test_manga.id}/favorite", headers=auth_headers)
    assert response.json() == {"isFavorite": True}

    response = await async_client.post(url, headers=auth_headers)
    assert response.json() == {"isFavorite": False, "status": "removed"}


async def test_favorites_are_per_user(async_client: AsyncClient, auth_headers, other_auth_headers, test_manga):
    await async_client.post(f"{API}/users/favorites/{test_manga.id}/toggle", headers=auth_headers)

    response = await async_client.get(f"{API}/mangas/{test_manga.id}/favorite", headers=other_auth_headers)
    assert response.json() == {"isFavorite": False}


async def test_list_my_favorites(async_client: AsyncClient, auth_headers, test_manga):
    response = await async_client.get(f"{API}/users/me/favorites", headers=auth_headers)
    assert response.json() == []

    await async_client.post(f"{API}/users/favorites/{test_manga.id}/toggle", headers=auth_headers)

    response = await async_client.get(f"{API}/users/me/favorites", headers=auth_headers)
    assert response.status_code == 200
    favorites = response.json()
    assert [manga["title"] for manga in favorites] == ["Berserk"]
    assert "totalVotes" in favorites[0]


async def test_favorite_unknown_manga(async_client: AsyncClient, auth_headers):
    response = await async_client.post(f"{API}/users/favorites/999999/toggle", headers=auth_headers)
    assert response.status_code == 404

    response = await async_client.get(f"{API}/mangas/999999/favorite", headers=auth_headers)
    assert response.status_code == 404


async def test_favorites_require_login(async_client: AsyncClient, test_manga):
    response = await async_client.post(f"{API}/users/favorites/{test_manga.id}/toggle")
    assert response.status_code == 401

    response = await async_client.get(f"{API}/mangas/{test_manga.id}/favorite")
    assert response.status_code == 401
