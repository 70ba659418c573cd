from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, List

from sqlalchemy import CheckConstraint, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from manga_portal.core.exceptions import RatingValidationException

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .manga import Manga
    from .user import User

MIN_RATING = 1
MAX_RATING = 5


class Rating(TimestampMixin, Base):
    """Оценка манги пользователем. Одна строка на пару (пользователь, манга)."""

    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "manga_id", name="uq_ratings_user_manga"),
        CheckConstraint(f"value >= {MIN_RATING} AND value <= {MAX_RATING}", name="ck_ratings_value_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    manga_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("mangas.id", ondelete="CASCADE"), index=True, nullable=False
    )
    value: Mapped[int] = mapped_column(Integer, nullable=False)

    user: Mapped["User"] = relationship(back_populates="ratings")
    manga: Mapped["Manga"] = relationship(back_populates="ratings")


def _coerce_integer(raw: Any) -> tuple[int | None, str | None]:
    if isinstance(raw, bool):
        return None, "is not a number"
    if isinstance(raw, int):
        return raw, None
    if isinstance(raw, str):
        raw = raw.strip()
        try:
            return int(raw), None
        except ValueError:
            try:
                raw = float(raw)
            except ValueError:
                return None, "is not a number"
    if isinstance(raw, float):
        if math.isfinite(raw) and raw.is_integer():
            return int(raw), None
        return None, "must be an integer"
    return None, "is not a number"


def validate_rating_value(raw: Any) -> int:
    """
    Проверяет и приводит присланное значение оценки.

    Целые строки и float приводятся так же, как это сделала бы целочисленная
    колонка. Булевы, дробные и нечисловые значения отклоняются.

    Raises:
        RatingValidationException: с сообщениями для поля ``value``
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise RatingValidationException({"value": ["can't be blank"]})

    value, error = _coerce_integer(raw)
    if error:
        raise RatingValidationException({"value": [error]})

    errors: List[str] = []
    if value < MIN_RATING:
        errors.append(f"must be greater than or equal to {MIN_RATING}")
    if value > MAX_RATING:
        errors.append(f"must be less than or equal to {MAX_RATING}")
    if errors:
        raise RatingValidationException({"value": errors})
    return value
