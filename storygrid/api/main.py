"""Main FastAPI application for Storygrid."""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from storygrid import __version__
from storygrid.core.config import StorygridConfig, load_config
from storygrid.core.exceptions import (
    MissingConfigError,
    NoResultError,
    ParseError,
    RateLimitError,
    ServiceError,
    StorygridError,
)
from storygrid.core.logging_config import get_logger

from .routers import storyboard

logger = get_logger("api.main")


def _error_status(error: StorygridError) -> int:
    if isinstance(error, NoResultError):
        return 404
    if isinstance(error, RateLimitError):
        return 429
    if isinstance(error, (ServiceError, ParseError)):
        return 502
    if isinstance(error, MissingConfigError):
        return 500
    return 400


async def storygrid_error_handler(request: Request, exc: StorygridError) -> JSONResponse:
    status_code = _error_status(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": exc.message, "details": exc.details},
    )


def create_app(config: StorygridConfig = None) -> FastAPI:
    """Build the API app around a fresh (empty) session slot."""
    app = FastAPI(
        title="Storygrid API",
        description="Bilingual grid storyboards from reference images",
        version=__version__,
    )

    app.state.config = config or load_config()
    app.state.session = None
    app.state.limiter = storyboard.limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(StorygridError, storygrid_error_handler)

    # CORS middleware for web UI
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(storyboard.router, prefix="/api/storyboard", tags=["storyboard"])

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app


def start_server(host: str = "127.0.0.1", port: int = 8000, reload: bool = False):
    """Start the FastAPI server."""
    uvicorn.run(
        "storygrid.api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="warning",
    )


if __name__ == "__main__":
    start_server()
