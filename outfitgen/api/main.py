"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from prometheus_client import make_asgi_app

from outfitgen import __version__
from outfitgen.api import generation, preprocess, vectorize, wardrobe
from outfitgen.config.settings import Settings, get_settings
from outfitgen.db.session import Database
from outfitgen.imggen.errors import GenerationError
from outfitgen.imggen.gemini_client import GeminiClient
from outfitgen.imgproc.normalize import InvalidImageError
from outfitgen.monitoring.logging import configure_logging
from outfitgen.services.wardrobe import WardrobeError
from outfitgen.storage.backend import LocalStorage, StorageBackend
from outfitgen.vectorizer.client import VectorizerClient, VectorizerError

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GenerationError)
    async def _generation_error(request: Request, exc: GenerationError) -> JSONResponse:
        return _error(exc.status_code, exc.message)

    @app.exception_handler(WardrobeError)
    async def _wardrobe_error(request: Request, exc: WardrobeError) -> JSONResponse:
        return _error(exc.status_code, str(exc))

    @app.exception_handler(VectorizerError)
    async def _vectorizer_error(request: Request, exc: VectorizerError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Vectorizer request failed: %s", exc)
        return _error(exc.status_code, str(exc))

    @app.exception_handler(InvalidImageError)
    async def _invalid_image(request: Request, exc: InvalidImageError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return _error(400, "Invalid request format. Please try again.")

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return _error(500, str(exc) or "Internal server error")


def create_app(
    settings: Settings | None = None,
    *,
    gemini_client: GeminiClient | None = None,
    vectorizer_client: VectorizerClient | None = None,
    database: Database | None = None,
    storage: StorageBackend | None = None,
) -> FastAPI:
    """
    Initialise the FastAPI application.

    Clients passed in are used as-is and left open on shutdown; clients built
    here from ``settings`` are owned and closed by the application.
    """

    settings = settings or get_settings()
    configure_logging(settings)

    owned_clients: list[GeminiClient | VectorizerClient] = []
    if gemini_client is None and settings.google_ai_api_key:
        gemini_client = GeminiClient(settings)
        owned_clients.append(gemini_client)
    if vectorizer_client is None and settings.vectorizer_api_username and settings.vectorizer_api_password:
        vectorizer_client = VectorizerClient(settings)
        owned_clients.append(vectorizer_client)

    owns_database = False
    if database is None and settings.wardrobe_enabled:
        database = Database(settings.database_url)
        owns_database = True
    if storage is None and database is not None:
        storage = LocalStorage(Path(settings.media_root), settings.media_base_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if database is not None:
            await database.init()
        logger.info(
            "Outfit generator started (gemini=%s, vectorizer=%s, wardrobe=%s)",
            gemini_client is not None,
            vectorizer_client is not None,
            database is not None,
        )
        try:
            yield
        finally:
            for client in owned_clients:
                await client.close()
            if owns_database:
                await database.dispose()

    app = FastAPI(
        title="AI Outfit Generator API",
        version=__version__,
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gemini_client = gemini_client
    app.state.vectorizer_client = vectorizer_client
    app.state.database = database
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Image-Token", "X-Credits-Charged", "X-Credits-Calculated", "X-Receipt"],
    )
    _register_exception_handlers(app)

    app.include_router(generation.router)
    app.include_router(wardrobe.router)
    app.include_router(preprocess.router)
    app.include_router(vectorize.router)
    app.mount("/metrics", make_asgi_app())
    if isinstance(storage, LocalStorage) and settings.media_base_url.startswith("/"):
        app.mount(settings.media_base_url, StaticFiles(directory=storage.root), name="media")

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    return app
