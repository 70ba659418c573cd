"""
Интеграционные тесты API каталога манги
"""

import pytest
from httpx import AsyncClient

from ..utils import API

pytestmark = [pytest.mark.asyncio, pytest.mark.integration]


async def test_manga_detail_shape(async_client: AsyncClient, test_manga):
    response = await async_client.get(f"{API}/mangas/{test_manga.id}")

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["id"] == test_manga.id
    assert data["title"] == "Berserk"
    assert data["status"] == "ongoing"
    assert data["viewCount"] == 1_500_000
    assert data["releaseYear"] == 1989
    assert data["translationTeam"] == "Black Swordsman Scans"
    assert data["rating"] == 0.0
    assert data["totalVotes"] == 0
    assert sorted(genre["name"] for genre in data["genres"]) == ["Action", "Super Power"]
    assert [chapter["number"] for chapter in data["chapters"]] == [1, 2, 3]
    assert {"id", "number", "title", "createdAt", "viewCount"} <= set(data["chapters"][0])


async def test_manga_detail_not_found(async_client: AsyncClient):
    response = await async_client.get(f"{API}/mangas/999999")

    assert response.status_code == 404
    assert response.json()["error_code"] == "manga_not_found"


async def test_list_and_search_mangas(async_client: AsyncClient, test_manga):
    response = await async_client.get(f"{API}/mangas")
    assert response.status_code == 200
    assert [manga["title"] for manga in response.json()] == ["Berserk"]

    response = await async_client.get(f"{API}/mangas", params={"q": "bers"})
    assert [manga["id"] for manga in response.json()] == [test_manga.id]

    response = await async_client.get(f"{API}/mangas", params={"q": "naruto"})
    assert response.json() == []


async def test_admin_creates_manga(async_client: AsyncClient, admin_headers, test_manga):
    payload = {
        "title": "Vagabond",
        "author": "Takehiko Inoue",
        "status": "hiatus",
        "releaseYear": 1998,
        "viewCount": 2500,
        "genres": ["Action", " Seinen ", "Seinen"],
    }

    response = await async_client.post(f"{API}/mangas", json=payload, headers=admin_headers)

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["title"] == "Vagabond"
    assert data["status"] == "hiatus"
    assert data["releaseYear"] == 1998
    assert data["totalVotes"] == 0
    assert data["chapters"] == []
    assert sorted(genre["name"] for genre in data["genres"]) == ["Action", "Seinen"]

    # Жанр "Action" уже есть у существующей манги
    detail = await async_client.get(f"{API}/mangas/{test_manga.id}")
    action_ids = {genre["id"] for genre in detail.json()["genres"] if genre["name"] == "Action"}
    assert action_ids == {genre["id"] for genre in data["genres"] if genre["name"] == "Action"}


async def test_create_manga_validation(async_client: AsyncClient, admin_headers):
    response = await async_client.post(
        f"{API}/mangas", json={"title": "", "releaseYear": 1500}, headers=admin_headers
    )

    assert response.status_code == 422


async def test_non_admin_cannot_create_manga(async_client: AsyncClient, auth_headers):
    response = await async_client.post(f"{API}/mangas", json={"title": "Vagabond"}, headers=auth_headers)

    assert response.status_code == 403
    assert response.json()["error_code"] == "permission_denied"


async def test_admin_adds_chapter(async_client: AsyncClient, admin_headers, test_manga):
    response = await async_client.post(
        f"{API}/mangas/{test_manga.id}/chapters",
        json={"number": 4, "title": "The Golden Age", "viewCount": 10},
        headers=admin_headers,
    )

    assert response.status_code == 201, response.text
    assert response.json()["number"] == 4
    assert response.json()["viewCount"] == 10

    detail = await async_client.get(f"{API}/mangas/{test_manga.id}")
    assert [chapter["number"] for chapter in detail.json()["chapters"]] == [1, 2, 3, 4]


async def test_duplicate_chapter_number(async_client: AsyncClient, admin_headers, test_manga):
    response = await async_client.post(
        f"{API}/mangas/{test_manga.id}/chapters", json={"number": 3}, headers=admin_headers
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "chapter_already_exists"


async def test_chapter_for_unknown_manga(async_client: AsyncClient, admin_headers):
    response = await async_client.post(f"{API}/mangas/999999/chapters", json={"number": 1}, headers=admin_headers)

    assert response.status_code == 404


async def test_health(async_client: AsyncClient):
    response = await async_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers
