"""Business logic for managing the user's wardrobe and saved outfits."""

from __future__ import annotations

import logging
import re
import time
from pathlib import PurePath

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from outfitgen.db import models
from outfitgen.imggen.prompt_builder import GarmentType
from outfitgen.storage.backend import StorageBackend

logger = logging.getLogger(__name__)

BUCKETS = {
    GarmentType.TOP.value: "tops",
    GarmentType.BOTTOM.value: "bottoms",
}

# User ids become a storage path segment.
_UNSAFE_USER_ID = re.compile(r"[/\\]|\.\.")


class WardrobeError(RuntimeError):
    """A wardrobe failure reported to the client with ``status_code``."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.status_code = status_code
        super().__init__(message)


class WardrobeService:
    """Facade over storage and database operations."""

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage

    async def upload_item(
        self,
        session: AsyncSession,
        *,
        user_id: str,
        item_type: str,
        file_name: str,
        file_data: bytes,
        content_type: str | None = None,
    ) -> models.ClothingItem:
        """
        Store the image in the bucket for its type and record it in the wardrobe.

        The stored file is kept even if the database insert fails.
        """

        bucket = BUCKETS.get(item_type)
        if bucket is None:
            raise WardrobeError("type must be 'top' or 'bottom'")
        if _UNSAFE_USER_ID.search(user_id):
            raise WardrobeError("Invalid userId")

        extension = PurePath(file_name).suffix.lstrip(".") or "jpg"
        key = f"{user_id}/{int(time.time() * 1000)}.{extension}"
        try:
            image_url = await self._storage.save(bucket, key, file_data, content_type)
        except ValueError as exc:
            raise WardrobeError(str(exc)) from exc

        item = models.ClothingItem(
            user_id=user_id,
            type=item_type,
            image_url=image_url,
            storage_bucket=bucket,
            storage_key=key,
        )
        session.add(item)
        await session.commit()
        await session.refresh(item)
        logger.info("User %s uploaded %s %s", user_id, item_type, item.id)
        return item

    async def list_items(
        self,
        session: AsyncSession,
        *,
        user_id: str,
        item_type: str | None = None,
    ) -> list[models.ClothingItem]:
        """Return the user's clothing, newest first, optionally filtered by type."""

        stmt = select(models.ClothingItem).where(models.ClothingItem.user_id == user_id)
        if item_type and item_type != "all":
            stmt = stmt.where(models.ClothingItem.type == item_type)
        stmt = stmt.order_by(models.ClothingItem.created_at.desc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def delete_item(self, session: AsyncSession, *, item_id: str) -> None:
        """Delete a clothing row and its stored image."""

        item = await session.get(models.ClothingItem, item_id)
        if item is None:
            raise WardrobeError("Clothing item not found", status_code=404)

        await session.delete(item)
        await session.commit()
        if item.storage_bucket and item.storage_key:
            await self._storage.delete(item.storage_bucket, item.storage_key)

    async def save_outfit(
        self,
        session: AsyncSession,
        *,
        user_id: str,
        top_id: str,
        bottom_id: str,
        result_image_url: str,
    ) -> models.GeneratedOutfit:
        """Record a generated try-on result."""

        outfit = models.GeneratedOutfit(
            user_id=user_id,
            top_id=top_id,
            bottom_id=bottom_id,
            result_image_url=result_image_url,
        )
        session.add(outfit)
        await session.commit()
        await session.refresh(outfit)
        return outfit

    async def list_outfits(
        self,
        session: AsyncSession,
        *,
        user_id: str,
    ) -> list[models.GeneratedOutfit]:
        stmt = (
            select(models.GeneratedOutfit)
            .where(models.GeneratedOutfit.user_id == user_id)
            .order_by(models.GeneratedOutfit.created_at.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
