"""
Аутентификация и авторизация.

Два бэкенда fastapi-users используют одну JWT-стратегию: bearer для клиентов
API и cookie для браузера, поэтому страница манги и её скрипты
аутентифицируются одной и той же сессионной cookie.
"""

from typing import AsyncGenerator, Optional, Union

from fastapi import Depends, Request, Response
from fastapi_users import BaseUserManager, FastAPIUsers, IntegerIDMixin, InvalidPasswordException
from fastapi_users.authentication import AuthenticationBackend, BearerTransport, CookieTransport, JWTStrategy
from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from manga_portal.core.config import settings
from manga_portal.core.database import get_db
from manga_portal.core.exceptions import PermissionDeniedException, UserAlreadyExistsException
from manga_portal.core.logger_config import log_info, log_warning
from manga_portal.models.user import User
from manga_portal.schemas.user import UserCreate, UserUpdate

MIN_PASSWORD_LENGTH = 8
TOKEN_LIFETIME_SECONDS = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

bearer_transport = BearerTransport(tokenUrl=f"{settings.API_V1_STR.lstrip('/')}/auth/jwt/login")
cookie_transport = CookieTransport(
    cookie_name=settings.AUTH_COOKIE_NAME,
    cookie_max_age=TOKEN_LIFETIME_SECONDS,
    cookie_secure=settings.AUTH_COOKIE_SECURE,
    cookie_samesite="lax",
)


def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(secret=settings.SECRET_KEY, lifetime_seconds=TOKEN_LIFETIME_SECONDS, algorithm="HS256")


auth_backend = AuthenticationBackend(name="jwt", transport=bearer_transport, get_strategy=get_jwt_strategy)
cookie_auth_backend = AuthenticationBackend(name="cookie", transport=cookie_transport, get_strategy=get_jwt_strategy)


async def get_user_db(session: AsyncSession = Depends(get_db)) -> AsyncGenerator[SQLAlchemyUserDatabase, None]:
    yield SQLAlchemyUserDatabase(session, User)


class UserManager(IntegerIDMixin, BaseUserManager[User, int]):
    """
    Менеджер пользователей: проверяет уникальность username и минимальные
    требования к паролю, логирует события жизненного цикла аккаунта.
    """

    reset_password_token_secret = settings.SECRET_KEY
    verification_token_secret = settings.SECRET_KEY

    async def validate_password(self, password: str, user: Union[UserCreate, User]) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise InvalidPasswordException(reason=f"Password should be at least {MIN_PASSWORD_LENGTH} characters")
        if user.email and user.email.lower() in password.lower():
            raise InvalidPasswordException(reason="Password should not contain e-mail")

    async def _ensure_username_available(self, username: str) -> None:
        # Уникальность email проверяет сам fastapi-users
        result = await self.user_db.session.execute(select(User.id).where(User.username == username))
        if result.scalar_one_or_none() is not None:
            log_warning("Username already taken", {"username": username})
            raise UserAlreadyExistsException(details={"username": username})

    async def create(self, user_create: UserCreate, safe: bool = False, request: Optional[Request] = None) -> User:
        await self._ensure_username_available(user_create.username)
        return await super().create(user_create, safe, request)

    async def update(
        self, user_update: UserUpdate, user: User, safe: bool = False, request: Optional[Request] = None
    ) -> User:
        if user_update.username and user_update.username != user.username:
            await self._ensure_username_available(user_update.username)
        return await super().update(user_update, user, safe, request)

    async def on_after_register(self, user: User, request: Optional[Request] = None) -> None:
        log_info(f"User {user.id} has registered", {"user_id": user.id, "username": user.username})

    async def on_after_login(
        self, user: User, request: Optional[Request] = None, response: Optional[Response] = None
    ) -> None:
        log_info(f"User {user.id} logged in", {"user_id": user.id})

    async def on_after_update(self, user: User, update_dict: dict, request: Optional[Request] = None) -> None:
        log_info(f"User {user.id} has been updated", {"user_id": user.id, "fields": sorted(update_dict)})

    async def on_after_forgot_password(self, user: User, token: str, request: Optional[Request] = None) -> None:
        log_info(f"User {user.id} has forgot their password", {"user_id": user.id})


async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)


fastapi_users = FastAPIUsers[User, int](get_user_manager, [auth_backend, cookie_auth_backend])

current_active_user = fastapi_users.current_user(active=True)
current_optional_user = fastapi_users.current_user(active=True, optional=True)


async def current_admin_user(user: User = Depends(current_active_user)) -> User:
    """
    Текущий пользователь с правами администратора.

    Raises:
        HTTPException: 401, если пользователь не аутентифицирован
        PermissionDeniedException: 403, если пользователь не администратор
    """
    if not user.is_admin:
        raise PermissionDeniedException()
    return user
