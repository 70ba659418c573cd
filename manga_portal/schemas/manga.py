from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from manga_portal.models.manga import MangaStatus

from .common import CamelModel


class GenreResponse(CamelModel):
    id: int
    name: str


class ChapterResponse(CamelModel):
    id: int
    number: int
    title: Optional[str] = None
    created_at: datetime
    view_count: Optional[int] = None


class MangaSummaryResponse(CamelModel):
    """
    Элемент списка каталога.
    """

    id: int
    title: str
    cover_image: Optional[str] = None
    author: str = ""
    status: MangaStatus
    view_count: int = 0
    rating: float = 0.0
    total_votes: int = 0


class MangaDetailResponse(MangaSummaryResponse):
    """
    Полная запись манги в формате, который ожидает страница манги.
    """

    description: Optional[str] = None
    artist: Optional[str] = None
    release_year: Optional[int] = None
    translation_team: Optional[str] = None
    genres: List[GenreResponse] = []
    chapters: List[ChapterResponse] = []


class MangaCreate(CamelModel):
    """
    Данные для создания манги. Жанры задаются по имени и создаются при необходимости.
    """

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    cover_image: Optional[str] = Field(None, max_length=512)
    author: str = Field("", max_length=255)
    artist: Optional[str] = Field(None, max_length=255)
    status: MangaStatus = MangaStatus.ONGOING
    release_year: Optional[int] = Field(None, ge=1900, le=2100)
    translation_team: Optional[str] = Field(None, max_length=255)
    view_count: int = Field(0, ge=0)
    genres: List[str] = []

    @field_validator("genres")
    @classmethod
    def normalize_genres(cls, value: List[str]) -> List[str]:
        seen = []
        for name in value:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen


class ChapterCreate(CamelModel):
    number: int = Field(..., ge=0)
    title: Optional[str] = Field(None, max_length=255)
    view_count: Optional[int] = Field(None, ge=0)
