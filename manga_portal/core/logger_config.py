"""
Настройка логирования.

Loguru настраивается один раз при импорте: стандартный вывод в stderr
заменяется выводом в stdout и необязательным файлом с ротацией, а стандартный
``logging`` (uvicorn, SQLAlchemy, fastapi-users) перенаправляется в loguru.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from manga_portal.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


class InterceptHandler(logging.Handler):
    """Перенаправляет записи стандартного logging в loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Ищем кадр, из которого был вызван logging
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logger():
    """Настраивает обработчики loguru и перехватывает стандартный logging."""
    logger.remove()

    logger.add(
        sys.stdout,
        level=settings.LOG_LEVEL.upper(),
        colorize=True,
        format=CONSOLE_FORMAT,
    )

    if settings.LOG_FILE:
        Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            settings.LOG_FILE,
            level="INFO",
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
            compression="zip",
            enqueue=True,
            backtrace=True,
            diagnose=settings.DEBUG,
            format=FILE_FORMAT,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi_users"):
        logging.getLogger(name).handlers = [InterceptHandler()]
        logging.getLogger(name).propagate = False
    # SQL-запросы только по явному запросу
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.DB_ECHO_LOG else logging.WARNING)

    return logger


setup_logger()


def _context(context: Optional[Dict[str, Any]] = None, request_id: Optional[str] = None) -> Dict[str, Any]:
    log_data: Dict[str, Any] = {}
    if context:
        log_data["context"] = context
    if request_id:
        log_data["request_id"] = request_id
    return log_data


def log_info(message: str, context: Optional[Dict[str, Any]] = None, request_id: Optional[str] = None) -> None:
    """Логирует информационное сообщение."""
    logger.bind(**_context(context, request_id)).info(message)


def log_warning(message: str, context: Optional[Dict[str, Any]] = None, request_id: Optional[str] = None) -> None:
    """Логирует предупреждение."""
    logger.bind(**_context(context, request_id)).warning(message)


def log_error(
    error: Exception, error_type: str, context: Optional[Dict[str, Any]] = None, request_id: Optional[str] = None
) -> None:
    """Логирует ошибку вместе с трейсбеком."""
    log_data = {
        "error_type": error_type,
        "error": str(error),
        "error_class": error.__class__.__name__,
        "error_module": error.__class__.__module__,
        **_context(context, request_id),
    }
    logger.bind(**log_data).opt(exception=error).error(f"{error_type} error: {error}")


def log_db_error(error: Exception, operation: Optional[str] = None, context: Optional[Dict[str, Any]] = None) -> None:
    """Логирует ошибку базы данных."""
    error_msg = f"Database error: {error}"
    if operation:
        error_msg += f" Operation: {operation}"

    logger.bind(
        error_type="database",
        error_details=str(error),
        operation=operation,
        context=context,
        error_class=error.__class__.__name__,
    ).opt(exception=error).error(error_msg)


def log_cache_error(error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Логирует ошибку кэша. Ошибки кэша не прерывают запрос."""
    logger.bind(
        error_type="cache",
        error_details=str(error),
        context=context,
        error_class=error.__class__.__name__,
    ).warning(f"Cache error: {error}")


def log_validation_error(error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Логирует ошибку валидации запроса."""
    logger.bind(
        error_type="validation",
        error=str(error),
        error_class=error.__class__.__name__,
        **_context(context),
    ).warning(f"Validation error: {error}")


def log_business_error(message: str, context: Optional[Dict[str, Any]] = None) -> None:
    """Логирует бизнес-ошибку, которая возвращается клиенту."""
    logger.bind(**_context(context)).warning(f"Business error: {message}")


def log_performance(operation: str, duration: float, context: Optional[Dict[str, Any]] = None) -> None:
    """Логирует длительность операции."""
    logger.bind(operation=operation, duration=duration, **_context(context)).debug(
        f"Performance: {operation} took {duration:.4f} seconds"
    )


__all__ = [
    "logger",
    "setup_logger",
    "log_info",
    "log_warning",
    "log_error",
    "log_db_error",
    "log_cache_error",
    "log_validation_error",
    "log_business_error",
    "log_performance",
]
