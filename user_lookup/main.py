import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from user_lookup.api import error_response, router
from user_lookup.config import Settings, get_settings
from user_lookup.db import close_pool, create_indexes, create_pool
from user_lookup.logging import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan."""
    settings: Settings = app.state.settings

    # Startup: initialize database pool
    try:
        pool = await create_pool(settings)
    except Exception:
        logger.exception("database_connection_failed", host=settings.db_host)
        raise
    logger.info("database_connected")

    try:
        if settings.create_indexes:
            await create_indexes(pool)
    except Exception:
        logger.exception("index_creation_failed")
        await close_pool(pool)
        raise

    app.state.pool = pool
    logger.info("server_started", prefix=settings.api_prefix)
    yield
    # Shutdown: close database pool
    await close_pool(pool)
    logger.info("database_pool_closed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(title="User Lookup API", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        # Unhandled errors become a 500 in the generic handler
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration=f"{time.perf_counter() - start:.3f}s",
            )

    app.include_router(router, prefix=settings.api_prefix)

    # Custom exception handler for consistent error responses
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            method=request.method,
            path=request.url.path,
            exc_info=exc,
        )
        return error_response(500, "Internal server error")

    return app


def run():
    """Console entry point: serve the API with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    uvicorn.run(
        create_app(settings),
        host=settings.server_host,
        port=settings.server_port,
        access_log=False,
    )


if __name__ == "__main__":
    run()
