"""
FastAPI application entry point.

This module configures the FastAPI application with:
- Logging from settings
- CORS middleware
- CM error mapping
- Health check endpoints
- API routers
"""

from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from service_cm import __version__
from service_cm.config import get_settings
from service_cm.dependencies import get_tag_repository
from service_cm.errors import CMError
from service_cm.routers import checkout, commit, tags

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    yield

    # Release the pooled repository connection
    repository = get_tag_repository()
    close = getattr(repository, "close", None)
    if close is not None:
        await close()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Service CM",
        description=(
            "Configuration management of services through feature tags: "
            "checkout, commit, release, revert and tag cleanup."
        ),
        version=__version__,
        docs_url="/api/docs" if settings.env != "production" else None,
        redoc_url="/api/redoc" if settings.env != "production" else None,
        openapi_url="/api/openapi.json" if settings.env != "production" else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(tags.router)
    app.include_router(checkout.router)
    app.include_router(commit.router)

    # Health check endpoints
    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check."""
        return {"status": "healthy", "version": __version__}

    @app.get("/health/liveness", tags=["health"])
    async def liveness_check():
        """Kubernetes liveness probe."""
        return {"status": "alive"}

    @app.exception_handler(CMError)
    async def cm_error_handler(request: Request, exc: CMError):
        """Rejected input or blocked action; never fatal."""
        logger.info(f"{type(exc).__name__} on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "type": type(exc).__name__},
        )

    @app.exception_handler(httpx.HTTPStatusError)
    async def repository_error_handler(request: Request, exc: httpx.HTTPStatusError):
        """CM repository answered with an error."""
        logger.error(f"CM repository error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content={
                "detail": "CM repository request failed",
                "status": exc.response.status_code,
            },
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.exception(f"Unhandled error on {request.url.path}")
        if settings.debug:
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc), "type": type(exc).__name__},
            )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "service_cm.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.env == "development",
        workers=1 if settings.env == "development" else settings.workers,
    )
