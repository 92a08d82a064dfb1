"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    google_ai_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-flash-image"
    request_timeout: float = 120.0

    # Empty DATABASE_URL switches the wardrobe endpoints off.
    database_url: str = "sqlite+aiosqlite:///./data/app.db"
    media_root: str = "data/media"
    media_base_url: str = "/media"

    max_upload_mb: int = 10
    allowed_mime_types: tuple[str, ...] = ("image/png", "image/jpeg", "image/jpg", "image/webp")
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))

    vectorizer_api_username: str = ""
    vectorizer_api_password: str = ""
    vectorizer_base_url: str = "https://vectorizer.ai/api/v1"

    @property
    def wardrobe_enabled(self) -> bool:
        return bool(self.database_url)

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        google_ai_api_key=os.getenv("GOOGLE_AI_API_KEY", ""),
        gemini_base_url=os.getenv(
            "GEMINI_BASE_URL",
            "https://generativelanguage.googleapis.com/v1beta",
        ),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash-image"),
        request_timeout=float(os.getenv("REQUEST_TIMEOUT", "120")),
        database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./data/app.db"),
        media_root=os.getenv("MEDIA_ROOT", "data/media"),
        media_base_url=os.getenv("MEDIA_BASE_URL", "/media"),
        max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "10")),
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "*")),
        vectorizer_api_username=os.getenv("VECTORIZER_API_USERNAME", ""),
        vectorizer_api_password=os.getenv("VECTORIZER_API_PASSWORD", ""),
        vectorizer_base_url=os.getenv("VECTORIZER_BASE_URL", "https://vectorizer.ai/api/v1"),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
