"""
Image Compressor API - Main Application
FastAPI application for image upload, compression and automatic retention.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from image_compressor.api.v1 import api_router
from image_compressor.bootstrap import Components, build_components
from image_compressor.core.config import settings
from image_compressor.core.exceptions import ImageCompressorError, StorageError
from image_compressor.core.logging import setup_logging
from image_compressor.metrics import app_info, app_uptime_seconds
from image_compressor.middleware import MetricsMiddleware

logger = logging.getLogger(__name__)

# HTTP status for each domain error code; anything else is a 500
ERROR_STATUS_CODES = {
    "source_not_found": status.HTTP_404_NOT_FOUND,
    "object_not_found": status.HTTP_404_NOT_FOUND,
    "invalid_key": status.HTTP_400_BAD_REQUEST,
    "invalid_upload_request": status.HTTP_400_BAD_REQUEST,
    "malformed_event": status.HTTP_400_BAD_REQUEST,
    "invalid_quality": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "invalid_image": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "storage_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
    "queue_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
    "compression_timeout": status.HTTP_504_GATEWAY_TIMEOUT,
}


def create_app(components: Optional[Components] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        components: Pre-built components; built from settings at startup if omitted
    """
    started_at = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for startup and shutdown events.
        """
        logger.info("Starting Image Compressor API...")
        logger.info(f"Version: {settings.APP_VERSION}")

        app_info.labels(version=settings.APP_VERSION, environment="production").set(1)

        if getattr(app.state, "components", None) is None:
            app.state.components = build_components(settings)
            try:
                app.state.components.blob_store.ensure_bucket()
                logger.info("Object storage: OK")
            except StorageError as e:
                logger.error(f"Object storage: FAILED ({e})")

        logger.info("Application startup complete")

        yield

        logger.info("Shutting down Image Compressor API...")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Upload images, get compressed copies, and have uploaded "
                    "originals deleted automatically after the retention window.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.components = components

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(MetricsMiddleware)

    @app.exception_handler(ImageCompressorError)
    async def domain_exception_handler(request: Request, exc: ImageCompressorError):
        """Map domain errors to HTTP responses."""
        status_code = ERROR_STATUS_CODES.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        if status_code >= 500:
            logger.error(f"{exc.code} on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status_code,
            content={
                "error": str(exc),
                "code": exc.code,
                "status_code": status_code,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.detail,
                "code": "http_error",
                "status_code": exc.status_code,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "Validation error",
                "code": "validation_error",
                "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
                "details": jsonable_errors(exc),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "code": "internal_error",
                "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            },
        )

    @app.get("/health", tags=["health"])
    async def health_check(request: Request):
        """
        Health check endpoint.
        Returns the API status and the delay queue depth.
        """
        components: Components = request.app.state.components
        result = {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

        try:
            result["queue"] = {
                "status": "healthy",
                "pending": components.queue.approximate_size(),
            }
        except ImageCompressorError as e:
            result["status"] = "degraded"
            result["queue"] = {"status": "unhealthy", "error": str(e)}

        return result

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.get("/metrics", tags=["monitoring"])
    async def metrics():
        """
        Prometheus metrics endpoint.

        Returns metrics in Prometheus text format for scraping.
        """
        app_uptime_seconds.set(time.time() - started_at)

        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    @app.get("/", tags=["root"])
    async def root():
        """
        Root endpoint.
        Provides basic API information.
        """
        return {
            "message": "Welcome to Image Compressor API",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health",
        }

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the non-serializable ``ctx``/``input`` values."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "image_compressor.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=True,
        log_level=settings.LOG_LEVEL.lower(),
    )
