"""
Кэш Redis.

Кэширование необязательно: если ``REDIS_URL`` не задан или Redis недоступен
при старте, зависимость отдаёт ``None`` и функции кэша ничего не делают.
Ошибки кэша логируются и никогда не прерывают запрос.
"""

import json
from typing import Any, AsyncGenerator, Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from manga_portal.core.config import settings
from manga_portal.core.logger_config import log_cache_error, logger

redis_pool: Optional[ConnectionPool] = None


def manga_cache_key(manga_id: int) -> str:
    return f"manga:{manga_id}"


async def init_redis() -> None:
    """
    Создаёт пул соединений и проверяет, что Redis отвечает.
    """
    global redis_pool

    if not settings.REDIS_URL:
        logger.info("REDIS_URL is not set, caching disabled")
        return

    pool = ConnectionPool.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        health_check_interval=settings.REDIS_HEALTH_CHECK_INTERVAL,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=settings.REDIS_SOCKET_CONNECT_TIMEOUT,
    )
    try:
        async with Redis(connection_pool=pool) as redis:
            await redis.ping()
    except (RedisError, OSError) as e:
        log_cache_error(e, {"operation": "init", "redis_url": settings.REDIS_URL})
        await pool.disconnect()
        logger.warning("Redis unavailable, caching disabled")
        return

    redis_pool = pool
    logger.info("Redis connection initialized successfully")


async def close_redis() -> None:
    global redis_pool

    if redis_pool is not None:
        await redis_pool.disconnect()
        logger.info("Redis connection closed")
    redis_pool = None


async def get_redis_client() -> AsyncGenerator[Optional[Redis], None]:
    """
    Зависимость FastAPI: клиент Redis или ``None``, если кэширование выключено.
    """
    if redis_pool is None:
        yield None
        return

    client = Redis(connection_pool=redis_pool)
    try:
        yield client
    finally:
        await client.aclose()


async def get_cache(redis_client: Optional[Redis], key: str) -> Optional[Any]:
    """
    Читает JSON-значение из кэша.

    Returns:
        Декодированное значение или None при промахе и любой ошибке кэша
    """
    if redis_client is None:
        return None

    try:
        value = await redis_client.get(key)
    except RedisError as e:
        log_cache_error(e, {"operation": "get", "key": key})
        return None

    if value is None:
        logger.debug(f"Cache miss: {key}")
        return None

    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        log_cache_error(e, {"operation": "decode", "key": key})
        return None


async def set_cache(redis_client: Optional[Redis], key: str, value: Any, expire: Optional[int] = None) -> bool:
    if redis_client is None:
        return False

    try:
        await redis_client.set(key, json.dumps(value), ex=expire or settings.CACHE_TTL_SECONDS)
        logger.debug(f"Cache set: {key}")
        return True
    except (RedisError, TypeError) as e:
        log_cache_error(e, {"operation": "set", "key": key})
        return False


async def delete_cache(redis_client: Optional[Redis], key: str) -> bool:
    if redis_client is None:
        return False

    try:
        await redis_client.delete(key)
        logger.debug(f"Cache deleted: {key}")
        return True
    except RedisError as e:
        log_cache_error(e, {"operation": "delete", "key": key})
        return False
