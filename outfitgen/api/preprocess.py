"""Local background removal and compression endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from outfitgen.api.dependencies import get_app_settings
from outfitgen.config.settings import Settings
from outfitgen.imgproc.compositor import (
    WHITE,
    convert_to_transparent_png,
    convert_to_white_background_png,
    parse_hex_color,
    remove_person_background,
)
from outfitgen.imgproc.normalize import InvalidImageError, compress_image, validate_upload
from outfitgen.monitoring.metrics import preprocess_images_total

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/preprocess", tags=["preprocess"])


async def _read_image(file: UploadFile | None, settings: Settings) -> bytes:
    if file is None:
        raise InvalidImageError("Image is required")
    data = await file.read()
    problem = validate_upload(
        file.content_type,
        len(data),
        allowed_types=settings.allowed_mime_types,
        max_bytes=settings.max_upload_bytes,
    )
    if problem:
        raise InvalidImageError(problem)
    return data


def _png(content: bytes) -> Response:
    return Response(content=content, media_type="image/png")


@router.post("/transparent")
async def transparent(
    file: UploadFile | None = File(default=None),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Make the light background of a garment photo transparent."""

    data = await _read_image(file, settings)
    preprocess_images_total.labels(mode="transparent").inc()
    return _png(await asyncio.to_thread(convert_to_transparent_png, data))


@router.post("/white-background")
async def white_background(
    file: UploadFile | None = File(default=None),
    color: str | None = Form(default=None),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Resize a garment photo and snap its light background to a flat colour."""

    data = await _read_image(file, settings)
    try:
        fill = parse_hex_color(color) if color else WHITE
    except ValueError as exc:
        raise InvalidImageError(str(exc)) from exc
    preprocess_images_total.labels(mode="white_background").inc()
    content = await asyncio.to_thread(convert_to_white_background_png, data, color=fill)
    return _png(content)


@router.post("/person-background")
async def person_background(
    file: UploadFile | None = File(default=None),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Remove the backdrop of a person photo using the border colour."""

    data = await _read_image(file, settings)
    preprocess_images_total.labels(mode="person_background").inc()
    return _png(await asyncio.to_thread(remove_person_background, data))


@router.post("/compress")
async def compress(
    file: UploadFile | None = File(default=None),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    data = await _read_image(file, settings)
    content, mime_type = await asyncio.to_thread(compress_image, data, file.content_type)
    logger.debug("Compressed %d bytes to %d bytes", len(data), len(content))
    return Response(content=content, media_type=mime_type)
