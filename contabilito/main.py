"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from contabilito.core.config import Settings, settings as default_settings
from contabilito.core.exceptions import ContabilitoError, StorageError
from contabilito.core.middleware import setup_middleware
from contabilito.db.store import CredentialStore

from contabilito.api.auth import router as auth_router
from contabilito.api.dashboard import router as dashboard_router

logger = logging.getLogger("contabilito")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CredentialStore] = None,
) -> FastAPI:
    """Build the API. Pass ``store`` to share an already-configured database."""
    settings = settings or default_settings
    store = store or CredentialStore(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        logger.info("Starting %s API", settings.APP_NAME)
        store.open()
        store.ensure_schema()
        logger.info("Database schema ready")

        yield

        store.close()
        logger.info("Shutting down %s API", settings.APP_NAME)

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Multi-tenant bookkeeping backend",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.store = store

    # Middleware
    setup_middleware(app, settings)

    # Malformed bodies are client errors, not 422s
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "Malformed request body."},
        )

    # Domain errors that escaped a router
    @app.exception_handler(ContabilitoError)
    async def contabilito_exception_handler(request: Request, exc: ContabilitoError):
        if isinstance(exc, StorageError):
            logger.error("Unhandled storage error: %s", exc.message)
            return JSONResponse(status_code=exc.status_code, content={"detail": "Internal server error."})
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
        )

    # Register routers
    app.include_router(auth_router, prefix="/api")
    app.include_router(dashboard_router, prefix="/api")

    @app.get("/")
    async def root():
        return {
            "name": settings.APP_NAME,
            "version": "0.1.0",
            "docs": "/docs",
        }

    @app.get("/api/health")
    async def health():
        """Quick health check endpoint."""
        return {"status": "ok"}

    return app


configure_logging(default_settings)
app = create_app()
