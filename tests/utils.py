"""
Общие помощники для тестовых модулей
"""

from fastapi_users.password import PasswordHelper
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.core.config import settings
from manga_portal.models import User, UserRole

BASE_URL = "http://test"
API = settings.API_V1_STR

TEST_PASSWORD = "Str0ngPass!"

password_helper = PasswordHelper()


async def create_user(session: AsyncSession, email: str, username: str, admin: bool = False) -> User:
    user = User(
        email=email,
        username=username,
        hashed_password=password_helper.hash(TEST_PASSWORD),
        role=UserRole.ADMIN if admin else UserRole.USER,
        is_active=True,
        is_superuser=False,
        is_verified=True,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def login(client: AsyncClient, email: str, password: str = TEST_PASSWORD) -> dict:
    """Bearer-заголовки для пользователя"""
    response = await client.post(
        f"{API}/auth/jwt/login",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200, f"Login failed: {response.text}"
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
