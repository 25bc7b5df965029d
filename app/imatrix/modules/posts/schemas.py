from __future__ import annotations

from typing import ClassVar, Optional

from pydantic import Field

from app.imatrix.schemas import BaseSchema, CategorySummary, MediaSummary, Timestamps, UpdateSchema


class PostOut(Timestamps):
    id: int
    title: str
    slug: str
    body: Optional[str] = None
    excerpt: Optional[str] = None
    published: bool
    categories: list[CategorySummary] = []
    media: list[MediaSummary] = []


class PostIn(BaseSchema):
    title: str = Field(min_length=1, max_length=255)
    body: Optional[str] = None
    excerpt: Optional[str] = None
    published: bool = False
    category_ids: Optional[list[int]] = None


class PostUpdate(UpdateSchema):
    not_null: ClassVar[tuple[str, ...]] = ("title", "published")

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    body: Optional[str] = None
    excerpt: Optional[str] = None
    published: Optional[bool] = None
    category_ids: Optional[list[int]] = None
