from __future__ import annotations

from typing import Any, ClassVar, Optional

from pydantic import Field

from app.imatrix.schemas import BaseSchema, MediaSummary, Timestamps, UpdateSchema


class ProductOut(Timestamps):
    id: int
    name: str
    slug: str
    summary: Optional[str] = None
    description: Optional[str] = None
    specs: Any = None
    price: Optional[str] = None
    featured: bool
    media: list[MediaSummary] = []


class ProductIn(BaseSchema):
    name: str = Field(min_length=1, max_length=255)
    summary: Optional[str] = None
    description: Optional[str] = None
    specs: Any = None
    price: Optional[str] = None
    featured: bool = False


class ProductUpdate(UpdateSchema):
    not_null: ClassVar[tuple[str, ...]] = ("name", "featured")

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    summary: Optional[str] = None
    description: Optional[str] = None
    specs: Any = None
    price: Optional[str] = None
    featured: Optional[bool] = None


class ProductMediaIn(BaseSchema):
    media_id: int
