"""
Управление движком базы данных и сессиями.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from manga_portal.core.config import settings
from manga_portal.core.exceptions import (
    DatabaseConnectionException,
    DatabaseInitializationException,
    DatabaseSessionException,
)
from manga_portal.core.logger_config import logger
from manga_portal.models.base import Base

engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


def _engine_options(database_url: str) -> dict:
    options = {"echo": settings.DB_ECHO_LOG, "pool_pre_ping": True}
    # Пулы SQLite не принимают параметры размера
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
    return options


async def create_db_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Создаёт асинхронный движок и проверяет, что база данных отвечает.

    Returns:
        AsyncEngine: асинхронный движок SQLAlchemy
    """
    database_url = database_url or settings.DATABASE_URL
    start_time = time.time()
    logger.info("Creating database engine")

    try:
        new_engine = create_async_engine(database_url, **_engine_options(database_url))

        async with new_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        logger.bind(duration=time.time() - start_time).info("Database engine created")
        return new_engine

    except OperationalError as e:
        logger.bind(error=str(e), error_type=type(e).__name__).opt(exception=e).error(
            "Database engine creation failed - operational error"
        )
        raise DatabaseConnectionException(f"Could not connect to the database: {e}")

    except SQLAlchemyError as e:
        logger.bind(error=str(e), error_type=type(e).__name__).opt(exception=e).error("Database engine creation failed")
        raise DatabaseConnectionException(f"Could not create the database engine: {e}")


async def init_db(database_url: Optional[str] = None, create_tables: bool = True) -> None:
    """
    Инициализирует движок и фабрику сессий, создаёт недостающие таблицы.
    """
    global engine, AsyncSessionLocal

    start_time = time.time()
    logger.info("Initializing database...")

    engine = await create_db_engine(database_url)
    AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    if create_tables:
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.bind(error=str(e), error_type=type(e).__name__).opt(exception=e).error(
                "Database initialization failed"
            )
            raise DatabaseInitializationException(f"Could not initialize the database: {e}")

    logger.bind(duration=time.time() - start_time).info("Database initialized successfully")


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Контекстный менеджер для получения сессии базы данных.

    Сервисы сами коммитят свои изменения; всё незакоммиченное при ошибке
    откатывается.
    """
    if AsyncSessionLocal is None:
        logger.warning("Session factory not initialized, initializing database")
        await init_db()
        if AsyncSessionLocal is None:
            raise DatabaseConnectionException("Database engine is not initialized")

    session = AsyncSessionLocal()
    try:
        yield session
    except SQLAlchemyError as e:
        await session.rollback()
        logger.bind(error=str(e), error_type=type(e).__name__).opt(exception=e).error("Database session error")
        raise DatabaseSessionException(f"Database session error: {e}")
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Зависимость FastAPI для получения сессии базы данных.
    """
    async with get_db_session() as session:
        yield session


async def close_db_connection() -> None:
    """
    Закрывает движок.
    """
    global engine, AsyncSessionLocal

    if engine is not None:
        await engine.dispose()
        logger.info("Database connection closed")
    engine = None
    AsyncSessionLocal = None
