from __future__ import annotations

from typing import Any, ClassVar, Optional

from pydantic import Field

from app.imatrix.schemas import BaseSchema, MediaSummary, Timestamps, UpdateSchema


class SolutionOut(Timestamps):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    benefits: Any = None
    features: Any = None
    media: list[MediaSummary] = []


class SolutionIn(BaseSchema):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    benefits: Any = None
    features: Any = None


class SolutionUpdate(UpdateSchema):
    not_null: ClassVar[tuple[str, ...]] = ("name",)

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    benefits: Any = None
    features: Any = None
