"""Main FastAPI application."""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pagedrop import models  # noqa: F401  registers tables on Base.metadata
from pagedrop.api import admin, serve, sites
from pagedrop.config import Settings, settings as default_settings
from pagedrop.database import Base, make_engine, make_session_factory
from pagedrop.services.fetcher import UrlFetcher
from pagedrop.services.store import SiteStore
from pagedrop.utils.logger import logger

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and the storage root on startup, release the pool on shutdown."""
    Base.metadata.create_all(bind=app.state.engine)
    app.state.store.ensure_root()
    logger.info(f"PageDrop serving sites from {app.state.store.root}")
    try:
        yield
    finally:
        app.state.engine.dispose()
        logger.info("Database engine disposed")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": message}."""
    return JSONResponse(
        {"error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed request bodies as a 400 {"error": message}."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        field = errors[0].get("loc", ("request",))[-1]
        message = f"{field}: {errors[0].get('msg', 'invalid value')}"
    logger.warning(f"Rejected request to {request.url.path}: {message}")
    return JSONResponse({"error": message}, status_code=status.HTTP_400_BAD_REQUEST)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application and the services it holds.

    The engine, session factory, site store and URL fetcher are created once
    here and reached by request handlers through app.state.

    Args:
        settings: Settings to use, defaults to the environment-loaded settings

    Returns:
        Configured FastAPI application
    """
    settings = settings or default_settings

    app = FastAPI(
        title="PageDrop API",
        description="Publish uploaded files, fetched URLs and inline code as static sites",
        version=VERSION,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = make_engine(settings.database_url, settings.environment)
    app.state.session_factory = make_session_factory(app.state.engine)
    app.state.store = SiteStore(settings.sites_dir)
    app.state.fetcher = UrlFetcher(timeout=settings.fetch_timeout_seconds)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include routers
    app.include_router(sites.router)
    app.include_router(serve.router)
    app.include_router(admin.router)

    landing_page = Path(settings.public_dir) / "index.html"

    @app.get("/", include_in_schema=False)
    async def root():
        """Landing page."""
        return FileResponse(landing_page, media_type="text/html")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
