"""Wardrobe and saved-outfit endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from outfitgen.api.dependencies import get_app_settings, get_session, get_wardrobe_service
from outfitgen.api.schemas import SaveOutfitRequest
from outfitgen.config.settings import Settings
from outfitgen.imgproc.normalize import validate_upload
from outfitgen.services.wardrobe import WardrobeError, WardrobeService

router = APIRouter(prefix="/api", tags=["wardrobe"])

MISSING_FIELDS = "Missing required fields"


@router.post("/upload-image")
async def upload_image(
    file: UploadFile | None = File(default=None),
    item_type: str | None = Form(default=None, alias="type"),
    user_id: str | None = Form(default=None, alias="userId"),
    session: AsyncSession = Depends(get_session),
    wardrobe: WardrobeService = Depends(get_wardrobe_service),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """Store a clothing image and add it to the user's wardrobe."""

    if file is None or not item_type or not user_id:
        raise WardrobeError(MISSING_FIELDS)

    file_data = await file.read()
    problem = validate_upload(
        file.content_type,
        len(file_data),
        allowed_types=settings.allowed_mime_types,
        max_bytes=settings.max_upload_bytes,
    )
    if problem:
        raise WardrobeError(problem)

    item = await wardrobe.upload_item(
        session,
        user_id=user_id,
        item_type=item_type,
        file_name=file.filename or "upload.jpg",
        file_data=file_data,
        content_type=file.content_type,
    )
    return {"item": item.to_dict()}


@router.get("/clothing")
async def list_clothing(
    user_id: str | None = Query(default=None, alias="userId"),
    item_type: str = Query(default="all", alias="type"),
    session: AsyncSession = Depends(get_session),
    wardrobe: WardrobeService = Depends(get_wardrobe_service),
) -> dict[str, Any]:
    if not user_id:
        raise WardrobeError(MISSING_FIELDS)
    items = await wardrobe.list_items(session, user_id=user_id, item_type=item_type)
    return {"items": [item.to_dict() for item in items]}


@router.delete("/clothing/{item_id}")
async def delete_clothing(
    item_id: str,
    session: AsyncSession = Depends(get_session),
    wardrobe: WardrobeService = Depends(get_wardrobe_service),
) -> dict[str, bool]:
    await wardrobe.delete_item(session, item_id=item_id)
    return {"success": True}


@router.post("/save-outfit")
async def save_outfit(
    body: SaveOutfitRequest,
    session: AsyncSession = Depends(get_session),
    wardrobe: WardrobeService = Depends(get_wardrobe_service),
) -> dict[str, Any]:
    """Record a generated outfit against the two garments it was built from."""

    if not (body.user_id and body.top_id and body.bottom_id and body.result_image_url):
        raise WardrobeError(MISSING_FIELDS)

    outfit = await wardrobe.save_outfit(
        session,
        user_id=body.user_id,
        top_id=body.top_id,
        bottom_id=body.bottom_id,
        result_image_url=body.result_image_url,
    )
    return {"outfit": outfit.to_dict()}


@router.get("/outfits")
async def list_outfits(
    user_id: str | None = Query(default=None, alias="userId"),
    session: AsyncSession = Depends(get_session),
    wardrobe: WardrobeService = Depends(get_wardrobe_service),
) -> dict[str, Any]:
    if not user_id:
        raise WardrobeError(MISSING_FIELDS)
    outfits = await wardrobe.list_outfits(session, user_id=user_id)
    return {"outfits": [outfit.to_dict() for outfit in outfits]}
