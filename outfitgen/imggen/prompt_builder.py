"""Prompt construction helpers for the image generation calls."""

from __future__ import annotations

from enum import Enum


class BackgroundType(str, Enum):
    """Background treatment requested by the client."""

    TRANSPARENT = "transparent"
    WHITE = "white"
    CUSTOM = "custom"


class GarmentType(str, Enum):
    """Clothing slot used by outfit generation and garment extraction."""

    TOP = "top"
    BOTTOM = "bottom"


OUTFIT_PROMPT = (
    "Create a new image by combining the elements from the provided images. "
    "Take the top clothing item from image 1 and the bottom clothing item from image 2, "
    "and place them naturally onto the body in image 3 so it looks like the person is "
    "wearing the selected outfit. Fit to body shape and pose, preserve garment proportions "
    "and textures, match lighting and shadows, handle occlusion by hair and arms. "
    "CRITICAL: The background must be completely white (#FFFFFF) - do not use black, "
    "transparent, or any other background color. Replace any existing background with "
    "solid white. Do not change the person identity or add accessories."
)

_GARMENT_DESCRIPTIONS = {
    GarmentType.TOP: "the top garment (shirt, t-shirt, blouse, sweater or jacket)",
    GarmentType.BOTTOM: "the bottom garment (pants, jeans, shorts or skirt)",
}


class PromptBuilder:
    """Builds the textual instructions sent alongside the images."""

    def outfit(self) -> str:
        return OUTFIT_PROMPT

    def background_removal(
        self,
        background_type: BackgroundType | str,
        custom_color: str | None = None,
    ) -> str:
        """Return the instruction for the requested background treatment."""

        if background_type == BackgroundType.TRANSPARENT:
            return (
                "Remove the background from this image completely, making it transparent. "
                "Keep only the main subject(s) in the foreground. The output should have a "
                "transparent background (PNG format with alpha channel)."
            )
        if background_type == BackgroundType.WHITE:
            return (
                "Remove the background from this image and replace it with a solid white "
                "background (#FFFFFF). Keep only the main subject(s) in the foreground."
            )
        if background_type == BackgroundType.CUSTOM:
            color = custom_color or "#FFFFFF"
            return (
                f"Remove the background from this image and replace it with a solid {color} "
                "background. Keep only the main subject(s) in the foreground."
            )
        return (
            "Remove the background from this image completely, making it transparent. "
            "Keep only the main subject(s) in the foreground."
        )

    def pose_normalization(self) -> str:
        return (
            "Redraw the person in this photo standing straight, facing the camera, arms "
            "relaxed at the sides and feet slightly apart, full body visible from head to "
            "toes. Keep the same person, face, body shape, hairstyle and clothing exactly as "
            "they are. Use a plain solid white (#FFFFFF) background and even studio lighting."
        )

    def garment_extraction(self, garment_type: GarmentType | str) -> str:
        description = _GARMENT_DESCRIPTIONS.get(GarmentType(garment_type))
        return (
            f"Extract {description} worn by the person in this photo. Output only the garment "
            "as a flat product shot, front view, laid out naturally with no person, no body "
            "parts and no other clothing. Preserve the exact colors, patterns, logos, fabric "
            "texture and proportions. Use a solid white (#FFFFFF) background."
        )
