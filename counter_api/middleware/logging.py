# counter_api/middleware/logging.py
import time
import uuid
from typing import Callable, Awaitable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from loguru import logger

REQUEST_ID_HEADER = "X-Request-ID"

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = str(uuid.uuid4()) # Unique per request
        start_time = time.perf_counter()

        request.state.request_id = request_id

        client = f"{request.client.host}:{request.client.port}" if request.client else "unknown"
        logger.info(f"RID:{request_id} START Request: {request.method} {request.url.path} Client:{client}")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = (time.perf_counter() - start_time) * 1000 # ms
            logger.error(
                f"RID:{request_id} FAILED Request: {request.method} {request.url.path} "
                f"Error:{e} Duration:{process_time:.2f}ms"
            )
            # Re-raise so the application's exception handlers answer the client
            raise

        process_time = (time.perf_counter() - start_time) * 1000 # ms
        logger.info(
            f"RID:{request_id} END Request: {request.method} {request.url.path} "
            f"Status:{response.status_code} Duration:{process_time:.2f}ms"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
