"""Connectivity checks for the Gemini and vectorizer.ai accounts."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable

from outfitgen.config.settings import Settings, get_settings
from outfitgen.imggen.gemini_client import GeminiClient
from outfitgen.vectorizer.client import VectorizerClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IntegrationCheckResult:
    """Outcome of one provider probe."""

    name: str
    success: bool
    message: str
    elapsed_ms: float = 0.0


async def _probe(
    name: str,
    probe: Callable[[], Awaitable[bool]],
    success_message: str,
) -> IntegrationCheckResult:
    started = time.perf_counter()
    try:
        reachable = await probe()
    except Exception as exc:  # reported in the result
        logger.warning("%s check failed: %s", name, exc)
        reachable, message = False, str(exc) or type(exc).__name__
    else:
        message = success_message if reachable else "Service responded with non-success status."
    elapsed_ms = (time.perf_counter() - started) * 1000
    return IntegrationCheckResult(name=name, success=reachable, message=message, elapsed_ms=elapsed_ms)


async def check_gemini(settings: Settings | None = None) -> IntegrationCheckResult:
    """Look up the configured image model."""

    settings = settings or get_settings()

    async def _lookup_model() -> bool:
        client = GeminiClient(settings)
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _probe("Gemini", _lookup_model, f"Model {settings.gemini_model} is reachable.")


async def check_vectorizer(settings: Settings | None = None) -> IntegrationCheckResult:
    """Read the vectorizer.ai account status; a known subscription state counts as reachable."""

    settings = settings or get_settings()

    async def _read_account() -> bool:
        client = VectorizerClient(settings)
        try:
            status = await client.account()
        finally:
            await client.close()
        return status.subscription_state is not None

    return await _probe("Vectorizer.AI", _read_account, "Vectorizer.AI account is reachable.")


CHECKS: dict[str, Callable[[Settings | None], Awaitable[IntegrationCheckResult]]] = {
    "gemini": check_gemini,
    "vectorizer": check_vectorizer,
}


async def run_all_checks(
    settings: Settings | None = None,
    names: Iterable[str] | None = None,
) -> list[IntegrationCheckResult]:
    """Run the selected checks (all by default) concurrently, in registry order."""

    wanted = set(CHECKS if names is None else names)
    selected = [name for name in CHECKS if name in wanted]
    return list(await asyncio.gather(*(CHECKS[name](settings) for name in selected)))
