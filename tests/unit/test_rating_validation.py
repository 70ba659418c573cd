"""
Модульные тесты валидации оценки и тела ошибок
"""

import pytest

from manga_portal.core.exceptions import (
    MangaNotFoundException,
    PortalAPIException,
    RatingValidationException,
)
from manga_portal.models.rating import validate_rating_value


@pytest.mark.parametrize("raw, expected", [(1, 1), (5, 5), ("4", 4), (" 3 ", 3), (2.0, 2), ("5.0", 5)])
def test_valid_values_are_cast(raw, expected):
    assert validate_rating_value(raw) == expected


@pytest.mark.parametrize(
    "raw, message",
    [
        (None, "can't be blank"),
        ("", "can't be blank"),
        ("   ", "can't be blank"),
        ("abc", "is not a number"),
        (True, "is not a number"),
        ([4], "is not a number"),
        ({"value": 4}, "is not a number"),
        (3.5, "must be an integer"),
        ("4.5", "must be an integer"),
        (0, "must be greater than or equal to 1"),
        (-2, "must be greater than or equal to 1"),
        (6, "must be less than or equal to 5"),
        ("10", "must be less than or equal to 5"),
    ],
)
def test_invalid_values_are_rejected(raw, message):
    with pytest.raises(RatingValidationException) as exc_info:
        validate_rating_value(raw)

    assert exc_info.value.errors == {"value": [message]}
    assert exc_info.value.status_code == 422


def test_validation_error_body_shape():
    exc = RatingValidationException({"value": ["must be an integer"]})
    assert exc.to_dict() == {"errors": {"value": ["must be an integer"]}}


def test_application_error_body_shape():
    exc = MangaNotFoundException(message="Manga with id 7 not found")
    assert exc.status_code == 404
    assert exc.to_dict() == {"error_code": "manga_not_found", "message": "Manga with id 7 not found"}

    exc = PortalAPIException("API error 500", details={"status_code": 500})
    assert exc.to_dict()["details"] == {"status_code": 500}
    assert str(exc) == "portal_api_error: API error 500 (Details: {'status_code': 500})"
