from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Float, ForeignKey, Integer, String, Table, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, utcnow

if TYPE_CHECKING:
    from .favorite import Favorite
    from .rating import Rating


class MangaStatus(str, enum.Enum):
    """Статус выпуска манги."""

    ONGOING = "ongoing"
    COMPLETED = "completed"
    HIATUS = "hiatus"
    CANCELLED = "cancelled"

    def __str__(self):
        return self.value

    @classmethod
    def _missing_(cls, value):
        # Принимаем "ONGOING", "Completed" и т.п.
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None


# Связь многие-ко-многим между мангой и жанрами
manga_genres = Table(
    "manga_genres",
    Base.metadata,
    Column("manga_id", Integer, ForeignKey("mangas.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True),
)


class Genre(Base):
    __tablename__ = "genres"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)

    mangas: Mapped[list["Manga"]] = relationship(secondary=manga_genres, back_populates="genres")


class Manga(TimestampMixin, Base):
    __tablename__ = "mangas"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    cover_image: Mapped[Optional[str]] = mapped_column(String(512))
    author: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    artist: Mapped[Optional[str]] = mapped_column(String(255))
    status: Mapped[MangaStatus] = mapped_column(
        SAEnum(
            MangaStatus,
            values_callable=lambda x: [e.value for e in x],
            name="manga_status",
            native_enum=False,
            length=20,
        ),
        nullable=False,
        default=MangaStatus.ONGOING,
    )
    release_year: Mapped[Optional[int]] = mapped_column(Integer)
    translation_team: Mapped[Optional[str]] = mapped_column(String(255))
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Обновляется RatingRepository.refresh_aggregates при каждом изменении оценок
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    genres: Mapped[list[Genre]] = relationship(secondary=manga_genres, back_populates="mangas")
    chapters: Mapped[list["Chapter"]] = relationship(
        back_populates="manga", cascade="all, delete-orphan", order_by="Chapter.number"
    )
    ratings: Mapped[list["Rating"]] = relationship(back_populates="manga", cascade="all, delete-orphan")
    favorites: Mapped[list["Favorite"]] = relationship(back_populates="manga", cascade="all, delete-orphan")


class Chapter(Base):
    __tablename__ = "chapters"
    __table_args__ = (UniqueConstraint("manga_id", "number", name="uq_chapters_manga_number"),)

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    manga_id: Mapped[int] = mapped_column(ForeignKey("mangas.id", ondelete="CASCADE"), index=True, nullable=False)
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(255))
    view_count: Mapped[Optional[int]] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    manga: Mapped[Manga] = relationship(back_populates="chapters")
