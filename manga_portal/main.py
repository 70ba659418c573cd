import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from manga_portal.core.config import settings
from manga_portal.core.database import close_db_connection, init_db
from manga_portal.core.exceptions import MangaPortalException
from manga_portal.core.logger_config import (
    log_business_error,
    log_db_error,
    log_error,
    log_performance,
    log_validation_error,
    logger,
)
from manga_portal.core.middleware import setup_middleware
from manga_portal.core.redis import close_redis, init_redis
from manga_portal.routers.favorites import router as favorites_router
from manga_portal.routers.mangas import router as mangas_router
from manga_portal.routers.pages import router as pages_router
from manga_portal.routers.ratings import me_router as my_ratings_router
from manga_portal.routers.ratings import router as ratings_router
from manga_portal.routers.users import auth_router, users_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Подключение базы данных и кэша при старте, закрытие при остановке."""
    start_time = time.time()
    logger.info("Starting application...")

    try:
        await init_db()
        await init_redis()
        yield
    except Exception as e:
        logger.opt(exception=e).critical(f"Critical error during application lifespan: {e}")
        raise
    finally:
        await close_redis()
        await close_db_connection()
        log_performance("application_lifespan", time.time() - start_time)
        logger.info("Application stopped")


app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Manga catalog API with ratings, favorites and server-rendered detail pages",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_middleware(app)

app.include_router(auth_router, prefix=settings.API_V1_STR)
app.include_router(my_ratings_router, prefix=settings.API_V1_STR)
app.include_router(favorites_router, prefix=settings.API_V1_STR)
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(mangas_router, prefix=settings.API_V1_STR)
app.include_router(ratings_router, prefix=settings.API_V1_STR)
app.include_router(pages_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.VERSION}


def _request_context(request: Request) -> dict:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "method": request.method,
        "path": request.url.path,
    }


@app.exception_handler(MangaPortalException)
async def manga_portal_exception_handler(request: Request, exc: MangaPortalException):
    """Ошибки приложения отдаются со своим статус-кодом и телом."""
    log_business_error(message=str(exc), context=_request_context(request))
    content = exc.to_dict()
    if not settings.ERROR_DETAILS_ENABLED and "details" in content and exc.status_code >= 500:
        content.pop("details")
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    log_validation_error(exc, context=_request_context(request))
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    log_db_error(exc, operation="database_operation", context=_request_context(request))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    log_error(exc, "unhandled", context=_request_context(request))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def run() -> None:
    uvicorn.run(
        "manga_portal.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
