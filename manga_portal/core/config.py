"""
Настройки приложения из переменных окружения и необязательного файла ``.env``.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Настройки приложения.
    """

    # Основные
    PROJECT_NAME: str = "Manga Portal"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Безопасность
    SECRET_KEY: str = "CHANGE_ME_MANGA_PORTAL_SECRET"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 дней
    AUTH_COOKIE_NAME: str = "manga_portal_auth"
    AUTH_COOKIE_SECURE: bool = False

    # База данных
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "manga_portal"
    SQLALCHEMY_DATABASE_URI: Optional[str] = None
    DB_ECHO_LOG: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    @property
    def DATABASE_URL(self) -> str:
        """
        URL для подключения к базе данных.
        """
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Логирование
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "logs/app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"

    # Redis (без URL кэширование отключено)
    REDIS_URL: Optional[str] = None
    REDIS_SOCKET_TIMEOUT: float = 2.0
    REDIS_SOCKET_CONNECT_TIMEOUT: float = 2.0
    REDIS_HEALTH_CHECK_INTERVAL: int = 30
    CACHE_TTL_SECONDS: int = 3600

    # Серверный клиент API для страницы манги
    API_BASE_URL: str = "http://localhost:8000"
    API_TIMEOUT_SECONDS: float = 5.0

    # Ошибки
    ERROR_DETAILS_ENABLED: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore")


settings = Settings()
