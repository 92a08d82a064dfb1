"""SQLAlchemy models for stored clothing and generated outfits."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """Base class for ORM models."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, index=True
    )


class ClothingItem(Base):
    """A top or bottom uploaded to a user's wardrobe."""

    __tablename__ = "clothing"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(128), index=True, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    storage_bucket: Mapped[str | None] = mapped_column(String(32))
    storage_key: Mapped[str | None] = mapped_column(String(256))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.type,
            "image_url": self.image_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class GeneratedOutfit(Base):
    """A try-on result produced from one top and one bottom."""

    __tablename__ = "generated_outfits"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(128), index=True, nullable=False)
    top_id: Mapped[str] = mapped_column(ForeignKey("clothing.id"), nullable=False)
    bottom_id: Mapped[str] = mapped_column(ForeignKey("clothing.id"), nullable=False)
    result_image_url: Mapped[str] = mapped_column(Text, nullable=False)

    top: Mapped[ClothingItem] = relationship(foreign_keys=[top_id])
    bottom: Mapped[ClothingItem] = relationship(foreign_keys=[bottom_id])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "top_id": self.top_id,
            "bottom_id": self.bottom_id,
            "result_image_url": self.result_image_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
