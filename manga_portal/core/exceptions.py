from typing import Any, Dict, List, Optional

from fastapi import status


class MangaPortalException(Exception):
    """Базовое исключение для всех ошибок приложения Manga Portal"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"
    message: str = "Internal server error"
    details: Optional[Dict[str, Any]] = None

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        if message:
            self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        if details:
            self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Тело ответа API с ошибкой"""
        response: Dict[str, Any] = {"error_code": self.error_code, "message": self.message}
        if self.details:
            response["details"] = self.details
        return response

    def __str__(self) -> str:
        result = f"{self.error_code}: {self.message}"
        if self.details:
            result += f" (Details: {self.details})"
        return result


# Авторизация
class PermissionDeniedException(MangaPortalException):
    """Недостаточно прав"""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "permission_denied"
    message = "Not enough permissions to perform this operation"


# Пользователи
class UserAlreadyExistsException(MangaPortalException):
    """Username или email уже зарегистрирован"""

    status_code = status.HTTP_409_CONFLICT
    error_code = "user_already_exists"
    message = "A user with this username already exists"


# Каталог
class MangaNotFoundException(MangaPortalException):
    """Манга не найдена"""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "manga_not_found"
    message = "Manga not found"


class ChapterAlreadyExistsException(MangaPortalException):
    """Глава с таким номером у этой манги уже есть"""

    status_code = status.HTTP_409_CONFLICT
    error_code = "chapter_already_exists"
    message = "A chapter with this number already exists"


# Оценки
class RatingNotFoundException(MangaPortalException):
    """Оценка не найдена"""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "rating_not_found"
    message = "Rating not found"


class RatingValidationException(MangaPortalException):
    """Оценка не прошла валидацию модели.

    Отдаётся как ``{"errors": {field: [messages]}}``, какое бы правило ни
    сработало.
    """

    status_code = 422
    error_code = "invalid_rating"
    message = "Rating is invalid"

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__(details=errors)
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        return {"errors": self.errors}


# База данных
class DatabaseException(MangaPortalException):
    """Ошибка базы данных"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "database_error"
    message = "Database error"


class DatabaseSessionException(MangaPortalException):
    """Ошибка сессии базы данных"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "database_session_error"
    message = "Database session error"


class DatabaseConnectionException(MangaPortalException):
    """Ошибка подключения к базе данных"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "database_connection_error"
    message = "Could not connect to the database"


class DatabaseInitializationException(MangaPortalException):
    """Ошибка инициализации базы данных"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "database_initialization_error"
    message = "Database initialization failed"


# Серверный клиент API
class PortalAPIException(MangaPortalException):
    """JSON API ответил ошибкой или недоступен"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "portal_api_error"
    message = "Manga Portal API request failed"
