"""
FastAPI application for the availability and booking core

Slots are computed on read; bookings are committed transactionally
"""
import logging
from collections import defaultdict
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from booking_core.api.v1.router import api_v1_router
from booking_core.config.settings import get_settings
from booking_core.core.exceptions import BookingCoreError
from booking_core.core.middleware import correlation_id_middleware, request_logging_middleware
from booking_core.core.monitoring import health_router
from booking_core.utils.my_logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


def log_routes(app: FastAPI) -> None:
    routes_by_tag = defaultdict(list)
    for route in app.routes:
        if isinstance(route, APIRoute):
            tag = route.tags[0] if route.tags else "other"
            for method in sorted(route.methods):
                routes_by_tag[tag].append((method, route.path, route.name))

    total = 0
    for tag, routes in sorted(routes_by_tag.items()):
        for method, path, name in sorted(routes, key=lambda r: (r[1], r[0])):
            logger.debug(f"[{tag}] {method:8} {path} ({name})")
            total += 1
    logger.info(f"Total routes registered: {total}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    setup_logging()
    logger.info(f"{settings.APP_NAME} starting up")
    logger.info("Booking API available at /api/v1/public/, health check at /health")
    log_routes(app)

    yield

    # Shutdown
    logger.info(f"{settings.APP_NAME} shutting down")


async def booking_core_error_handler(request: Request, exc: BookingCoreError):
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    log = logger.warning if exc.status_code >= 500 else logger.info
    log(f"{request.method} {request.url.path} failed with {exc.code}: {exc.message} [{correlation_id}]")
    return await http_exception_handler(request, exc.to_http_exception())


async def unhandled_error_handler(request: Request, exc: Exception):
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    logger.error(
        f"Unhandled error on {request.method} {request.url.path} [{correlation_id}]: {exc}",
        exc_info=exc
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=settings.APP_NAME,
        description="Availability computation and conflict-free booking for multi-tenant scheduling",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID", "Retry-After"],
    )

    # Add custom middleware
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(correlation_id_middleware)

    app.add_exception_handler(BookingCoreError, booking_core_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers
    app.include_router(health_router, prefix="/health", tags=["monitoring"])
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "api": "/api/v1/",
                "health": "/health",
                "docs": "/docs" if settings.DEBUG else "disabled"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "booking_core.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
