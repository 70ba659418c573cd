"""
Модульные тесты функций кэша Redis и кэширования деталей манги
"""

import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from manga_portal.core.redis import delete_cache, get_cache, manga_cache_key, set_cache
from manga_portal.services.mangas import MangaService
from manga_portal.services.ratings import RatingService

pytestmark = pytest.mark.asyncio


class FakeRedis:
    """Замена клиента Redis в памяти для методов, которые используют функции кэша"""

    def __init__(self, broken: bool = False):
        self.data = {}
        self.broken = broken

    def _check(self):
        if self.broken:
            raise RedisConnectionError("Redis is down")

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self._check()
        self.data[key] = value

    async def delete(self, key):
        self._check()
        self.data.pop(key, None)


async def test_helpers_are_noops_without_client():
    assert await get_cache(None, "key") is None
    assert await set_cache(None, "key", {"a": 1}) is False
    assert await delete_cache(None, "key") is False


async def test_helpers_round_trip_json():
    client = FakeRedis()

    assert await set_cache(client, "key", {"a": 1}) is True
    assert json.loads(client.data["key"]) == {"a": 1}
    assert await get_cache(client, "key") == {"a": 1}
    assert await delete_cache(client, "key") is True
    assert await get_cache(client, "key") is None


async def test_cache_failures_are_swallowed():
    client = FakeRedis(broken=True)

    assert await get_cache(client, "key") is None
    assert await set_cache(client, "key", {"a": 1}) is False
    assert await delete_cache(client, "key") is False


async def test_corrupt_cache_entry_is_a_miss():
    client = FakeRedis()
    client.data["key"] = "{not json"

    assert await get_cache(client, "key") is None


async def test_manga_detail_is_cached_and_invalidated(async_session, test_user, test_manga):
    client = FakeRedis()
    key = manga_cache_key(test_manga.id)

    payload = await MangaService(async_session, client).get_detail(test_manga.id)
    assert payload["title"] == "Berserk"
    assert payload["totalVotes"] == 0
    assert key in client.data

    # Закэшированные данные отдаются как есть
    client.data[key] = json.dumps({**payload, "title": "From cache"})
    assert (await MangaService(async_session, client).get_detail(test_manga.id))["title"] == "From cache"

    result = await RatingService(async_session, client).create(test_user.id, test_manga.id, 3)
    assert result.rating == 3.0
    assert result.total_votes == 1
    assert key not in client.data

    payload = await MangaService(async_session, client).get_detail(test_manga.id)
    assert payload["title"] == "Berserk"
    assert payload["rating"] == 3.0
    assert payload["totalVotes"] == 1


async def test_detail_works_with_broken_cache(async_session, test_manga):
    payload = await MangaService(async_session, FakeRedis(broken=True)).get_detail(test_manga.id)

    assert payload["id"] == test_manga.id
