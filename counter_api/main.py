# counter_api/main.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status as fastapi_status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from counter_api.api.api import api_router
from counter_api.core.config import Settings, get_settings
from counter_api.db.store import CounterStore
from counter_api.middleware.logging import RequestLoggingMiddleware


def create_app(store: Optional[CounterStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the application.

    When no store is given one is created from the settings at startup. The
    store is initialized before the first request is served; a failure there
    aborts startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup...")
        counter_store = store or CounterStore.from_settings(settings)
        await counter_store.initialize()
        app.state.counter_store = counter_store
        logger.info(f"API available at {settings.base_url}")
        try:
            yield
        finally:
            logger.info("Application shutdown...")
            await counter_store.close()

    app = FastAPI(
        title="Counter API",
        description="A single shared counter backed by a relational table.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # --- Error Handling ---
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation Error: {exc.errors()}")
        return JSONResponse(
            status_code=fastapi_status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": "Validation Error", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(f"HTTP Exception: Status={exc.status_code}, Detail={exc.detail}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"Unhandled Exception: {exc}")
        return JSONResponse(status_code=fastapi_status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "An internal server error occurred."})

    # --- Middleware ---
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router)

    @app.get("/")
    async def read_root():
        return {"message": "Counter API", "api": "/api"}

    return app


app = create_app()
