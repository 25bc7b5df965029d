from __future__ import annotations

from typing import ClassVar, Literal, Optional

from app.imatrix.schemas import BaseSchema, ResourceType, Timestamps, UpdateSchema

MediaType = Literal["image", "video", "file"]


class MediaOut(Timestamps):
    id: int
    url: str
    file_name: str
    type: str
    alt: Optional[str] = None
    caption: Optional[str] = None
    content_type: str
    size_bytes: int
    thumbnail_url: Optional[str] = None


class MediaUploadIn(BaseSchema):
    alt: Optional[str] = None
    caption: Optional[str] = None
    type: Optional[MediaType] = None


class MediaUpdate(UpdateSchema):
    not_null: ClassVar[tuple[str, ...]] = ("type",)

    alt: Optional[str] = None
    caption: Optional[str] = None
    type: Optional[MediaType] = None


class AttachmentIn(BaseSchema):
    media_id: int
    resource_type: ResourceType
    resource_id: int
