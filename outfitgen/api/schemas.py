"""Request bodies accepted by the JSON endpoints."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from outfitgen.services.generation import ImageInput


class ImagePayload(BaseModel):
    """Base64 image with its declared MIME type."""

    model_config = ConfigDict(populate_by_name=True)

    data: str = ""
    mime_type: str = Field(default="image/jpeg", alias="mimeType")


# Older clients send a bare base64 string instead of an object.
ImageField = Optional[Union[str, ImagePayload]]


def as_image_input(value: ImageField) -> ImageInput | None:
    if isinstance(value, ImagePayload):
        return ImageInput(data=value.data, mime_type=value.mime_type or "image/jpeg")
    return ImageInput.from_payload(value)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenerateOutfitRequest(_CamelModel):
    top_image: ImageField = Field(default=None, alias="topImage")
    bottom_image: ImageField = Field(default=None, alias="bottomImage")
    person_image: ImageField = Field(default=None, alias="personImage")


class RemoveBackgroundRequest(_CamelModel):
    image: ImageField = None
    background_type: Optional[str] = Field(default="transparent", alias="backgroundType")
    custom_background_color: Optional[str] = Field(default=None, alias="customBackgroundColor")


class NormalizePoseRequest(_CamelModel):
    image: ImageField = None


class ExtractGarmentRequest(_CamelModel):
    image: ImageField = None
    garment_type: Optional[str] = Field(default="top", alias="garmentType")


class SaveOutfitRequest(_CamelModel):
    user_id: Optional[str] = Field(default=None, alias="userId")
    top_id: Optional[str] = Field(default=None, alias="topId")
    bottom_id: Optional[str] = Field(default=None, alias="bottomId")
    result_image_url: Optional[str] = Field(default=None, alias="resultImageUrl")
