"""
HTTP middleware.
"""

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from manga_portal.core.logger_config import log_performance, logger

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Логирует каждый запрос: статус, длительность и идентификатор запроса.

    Идентификатор берётся из ``X-Request-ID``, если клиент его прислал,
    сохраняется в ``request.state`` и возвращается в заголовках ответа.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        log_data = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else None,
        }

        try:
            response = await call_next(request)
        except Exception:
            logger.bind(**log_data, process_time=time.time() - start_time).exception(
                f"Request failed: {request.method} {request.url.path}"
            )
            raise

        process_time = time.time() - start_time
        logger.bind(**log_data, status_code=response.status_code, process_time=process_time).info(
            f"{request.method} {request.url.path} -> {response.status_code}"
        )
        log_performance(f"{request.method} {request.url.path}", process_time, {"request_id": request_id})

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def setup_middleware(app: FastAPI) -> None:
    app.add_middleware(RequestLoggingMiddleware)
