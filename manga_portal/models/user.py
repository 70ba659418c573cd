import enum
from typing import TYPE_CHECKING, List

from fastapi_users_db_sqlalchemy import SQLAlchemyBaseUserTable
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .favorite import Favorite
    from .rating import Rating


class UserRole(enum.IntEnum):
    """Роль пользователя, хранится числом в ``users.role``."""

    USER = 0
    ADMIN = 1


class User(SQLAlchemyBaseUserTable[int], TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    # fastapi-users читает ``hashed_password``, а колонка сохраняет историческое имя
    hashed_password: Mapped[str] = mapped_column("password_digest", String(1024), nullable=False)
    role: Mapped[int] = mapped_column(Integer, nullable=False, default=UserRole.USER)

    ratings: Mapped[List["Rating"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    favorites: Mapped[List["Favorite"]] = relationship(back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.is_superuser or self.role == UserRole.ADMIN
