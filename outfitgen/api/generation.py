"""Endpoints that forward images to the generative model."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from outfitgen.api.dependencies import get_generation_service
from outfitgen.api.schemas import (
    ExtractGarmentRequest,
    GenerateOutfitRequest,
    NormalizePoseRequest,
    RemoveBackgroundRequest,
    as_image_input,
)
from outfitgen.services.generation import GenerationService

router = APIRouter(prefix="/api", tags=["generation"])


@router.post("/generate-outfit")
async def generate_outfit(
    body: GenerateOutfitRequest,
    service: GenerationService = Depends(get_generation_service),
) -> dict[str, str]:
    """Composite the top and bottom garments onto the person photo."""

    image_url = await service.generate_outfit(
        as_image_input(body.top_image),
        as_image_input(body.bottom_image),
        as_image_input(body.person_image),
    )
    return {"imageUrl": image_url}


@router.post("/remove-background")
async def remove_background(
    body: RemoveBackgroundRequest,
    service: GenerationService = Depends(get_generation_service),
) -> dict[str, str]:
    background_type = body.background_type or "transparent"
    image_url = await service.remove_background(
        as_image_input(body.image),
        background_type,
        body.custom_background_color,
    )
    return {
        "imageUrl": image_url,
        "backgroundType": background_type,
        "message": "Background removed successfully",
    }


@router.post("/normalize-pose")
async def normalize_pose(
    body: NormalizePoseRequest,
    service: GenerationService = Depends(get_generation_service),
) -> dict[str, str]:
    image_url = await service.normalize_pose(as_image_input(body.image))
    return {"imageUrl": image_url}


@router.post("/extract-garment")
async def extract_garment(
    body: ExtractGarmentRequest,
    service: GenerationService = Depends(get_generation_service),
) -> dict[str, str]:
    image_url = await service.extract_garment(
        as_image_input(body.image),
        body.garment_type or "top",
    )
    return {"imageUrl": image_url}
