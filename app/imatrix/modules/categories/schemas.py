from __future__ import annotations

from pydantic import Field

from app.imatrix.schemas import BaseSchema, Timestamps


class CategoryOut(Timestamps):
    id: int
    name: str
    slug: str
    post_count: int = 0


class CategoryIn(BaseSchema):
    name: str = Field(min_length=1, max_length=255)
