from typing import Optional

from fastapi_users import schemas
from pydantic import Field

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


class UserRead(schemas.BaseUser[int]):
    username: str
    role: int


class UserCreate(schemas.BaseUserCreate):
    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)


class UserUpdate(schemas.BaseUserUpdate):
    username: Optional[str] = Field(None, min_length=3, max_length=50, pattern=USERNAME_PATTERN)
