from fastapi import APIRouter

from manga_portal.core.auth import auth_backend, cookie_auth_backend, fastapi_users
from manga_portal.schemas.user import UserCreate, UserRead, UserUpdate

auth_router = APIRouter(prefix="/auth", tags=["auth"])
auth_router.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/jwt")
auth_router.include_router(fastapi_users.get_auth_router(cookie_auth_backend), prefix="/cookie")
auth_router.include_router(fastapi_users.get_register_router(UserRead, UserCreate))

users_router = APIRouter(prefix="/users", tags=["users"])
users_router.include_router(fastapi_users.get_users_router(UserRead, UserUpdate))
