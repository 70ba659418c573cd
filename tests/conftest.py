"""
Фикстуры для тестов
"""

import httpx
import pytest
from fastapi import Request
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from manga_portal.core.database import get_db
from manga_portal.core.redis import get_redis_client
from manga_portal.main import app
from manga_portal.models import Base, Chapter, Genre, Manga, User
from manga_portal.web.api_client import get_portal_api

from .utils import BASE_URL, create_user, login


@pytest.fixture
async def test_engine(tmp_path):
    """Временная база SQLite на каждый тест"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def async_session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def async_session(async_session_maker):
    async with async_session_maker() as session:
        yield session


@pytest.fixture
async def async_client(async_session_maker):
    """
    HTTP-клиент приложения с тестовой базой, без кэша и с клиентом API
    страницы манги, направленным обратно в то же приложение.
    """

    async def override_get_db():
        async with async_session_maker() as session:
            yield session

    async def override_get_redis_client():
        yield None

    def override_get_portal_api(request: Request):
        api = get_portal_api(request)
        api.base_url = BASE_URL
        api.transport = httpx.ASGITransport(app=app)
        return api

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = override_get_redis_client
    app.dependency_overrides[get_portal_api] = override_get_portal_api

    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BASE_URL) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def test_user(async_session: AsyncSession) -> User:
    return await create_user(async_session, "reader@example.com", "reader")


@pytest.fixture
async def other_user(async_session: AsyncSession) -> User:
    return await create_user(async_session, "second.reader@example.com", "second_reader")


@pytest.fixture
async def admin_user(async_session: AsyncSession) -> User:
    return await create_user(async_session, "admin@example.com", "admin", admin=True)


@pytest.fixture
async def auth_headers(async_client: AsyncClient, test_user: User) -> dict:
    return await login(async_client, test_user.email)


@pytest.fixture
async def other_auth_headers(async_client: AsyncClient, other_user: User) -> dict:
    return await login(async_client, other_user.email)


@pytest.fixture
async def admin_headers(async_client: AsyncClient, admin_user: User) -> dict:
    return await login(async_client, admin_user.email)


@pytest.fixture
async def test_manga(async_session: AsyncSession) -> Manga:
    """Манга с двумя жанрами и главами, сохранёнными не по порядку"""
    manga = Manga(
        title="Berserk",
        description="Guts, a former mercenary, wanders in search of revenge.",
        author="Kentaro Miura",
        artist="Kentaro Miura",
        release_year=1989,
        translation_team="Black Swordsman Scans",
        view_count=1_500_000,
        genres=[Genre(name="Action"), Genre(name="Super Power")],
        chapters=[
            Chapter(number=3, title="The Guardians of Desire", view_count=1500),
            Chapter(number=1, title="The Black Swordsman", view_count=150_000),
            Chapter(number=2, title="The Brand", view_count=500),
        ],
    )
    async_session.add(manga)
    await async_session.commit()
    await async_session.refresh(manga)
    return manga
