"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from appgen import __version__
from appgen.api.middleware import RequestLoggingMiddleware
from appgen.api.v1.router import router as v1_router
from appgen.config import settings
from appgen.core.exceptions import AppGenError, UpstreamCallError, UpstreamErrorKind
from appgen.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

UPSTREAM_STATUS_CODES = {
    UpstreamErrorKind.AUTH: status.HTTP_502_BAD_GATEWAY,
    UpstreamErrorKind.RATE_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS,
    UpstreamErrorKind.NETWORK: status.HTTP_503_SERVICE_UNAVAILABLE,
    UpstreamErrorKind.MALFORMED: status.HTTP_502_BAD_GATEWAY,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    configure_logging(settings)
    logger.info(
        "application.starting",
        version=__version__,
        environment=settings.app_env,
        model=settings.generation_model,
        offline=not settings.has_upstream_credentials,
    )

    yield

    # Shutdown
    logger.info("application.shutdown")


def _error_response(status_code: int, exc: AppGenError, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": code,
                "message": exc.message,
                "details": exc.details,
            },
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="AppGen API",
        description="Turns natural-language app descriptions into structured code artifacts",
        version=__version__,
        docs_url="/docs" if settings.app_debug else None,
        redoc_url="/redoc" if settings.app_debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers
    @app.exception_handler(UpstreamCallError)
    async def upstream_error_handler(request: Request, exc: UpstreamCallError) -> JSONResponse:
        """Map classified upstream failures onto HTTP status codes."""
        return _error_response(
            UPSTREAM_STATUS_CODES.get(exc.kind, status.HTTP_502_BAD_GATEWAY),
            exc,
            f"UPSTREAM_{exc.kind.value.upper()}",
        )

    @app.exception_handler(AppGenError)
    async def app_error_handler(request: Request, exc: AppGenError) -> JSONResponse:
        """Handle application-specific errors."""
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, exc, type(exc).__name__.upper()
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected errors."""
        logger.error(
            "unhandled_exception",
            error=str(exc),
            path=request.url.path,
            exc_info=True,
        )

        message = str(exc) if settings.is_development else "An unexpected error occurred"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": {"code": "INTERNAL_ERROR", "message": message},
            },
        )

    # Include routers
    app.include_router(v1_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "appgen.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )
