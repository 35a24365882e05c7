"""FastAPI application for tile rendering."""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from snapshot_worker.config import settings
from snapshot_worker.logging_config import setup_dev_logging, setup_production_logging
from snapshot_worker.routes import create_api_router

if settings.dev_mode:
    setup_dev_logging(json_format=settings.log_json)
else:
    setup_production_logging(settings.log_file, settings.error_log_file)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):  # type: ignore[no-untyped-def]
    """Log startup and shutdown with the effective render settings."""
    logger.info(
        f"Snapshot worker starting (default tile {settings.default_tile_size}px, "
        f"max {settings.max_tile_size}px, supersample x{settings.supersample})"
    )
    yield
    logger.info("Snapshot worker shutting down")


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch all unhandled exceptions and log them with full traceback."""
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}\n{''.join(tb)}"
    )
    content: dict[str, Any] = {"detail": "Internal Server Error"}
    return JSONResponse(status_code=500, content=content)


def create_app() -> FastAPI:
    """Build the application with all routes and handlers installed."""
    application = FastAPI(
        title="Snapshot Worker",
        description="Renders canvas tiles from vector strokes",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.include_router(create_api_router())
    application.add_exception_handler(Exception, global_exception_handler)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "snapshot_worker.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.dev_mode,
    )
