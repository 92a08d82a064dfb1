"""Route dependencies that hand out the clients owned by the application."""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from outfitgen.config.settings import Settings
from outfitgen.imggen.errors import ConfigurationError
from outfitgen.services.generation import GenerationService
from outfitgen.services.wardrobe import WardrobeError, WardrobeService
from outfitgen.vectorizer.client import VectorizerClient, VectorizerError


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_generation_service(request: Request) -> GenerationService:
    """Return a service bound to the shared Gemini client, or fail with 500 if unconfigured."""

    client = request.app.state.gemini_client
    if client is None:
        raise ConfigurationError("GOOGLE_AI_API_KEY is not configured")
    return GenerationService(client)


def _require_wardrobe(request: Request) -> None:
    if request.app.state.database is None:
        raise WardrobeError("Wardrobe storage is not enabled", status_code=400)


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield a database session for the duration of the request."""

    _require_wardrobe(request)
    async with request.app.state.database.session_factory() as session:
        yield session


def get_wardrobe_service(request: Request) -> WardrobeService:
    _require_wardrobe(request)
    return WardrobeService(request.app.state.storage)


def require_vectorizer_client(request: Request) -> VectorizerClient:
    """Return the vectorizer client; called after request validation so 400s win over 500s."""

    client = request.app.state.vectorizer_client
    if client is None:
        raise VectorizerError("API credentials not configured", status_code=500)
    return client
