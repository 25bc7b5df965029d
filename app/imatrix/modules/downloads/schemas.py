from __future__ import annotations

from typing import ClassVar, Literal, Optional

from pydantic import Field

from app.imatrix.schemas import BaseSchema, Timestamps, UpdateSchema

DownloadKind = Literal["manual", "software", "report", "brochure"]


class DownloadOut(Timestamps):
    id: int
    title: str
    description: Optional[str] = None
    kind: str
    file_url: str
    file_name: Optional[str] = None
    file_size: Optional[str] = None


class DownloadIn(BaseSchema):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    kind: DownloadKind = "manual"
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[str] = None


class DownloadUploadIn(BaseSchema):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    kind: DownloadKind = "manual"


class DownloadUpdate(UpdateSchema):
    not_null: ClassVar[tuple[str, ...]] = ("title", "kind", "file_url")

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    kind: Optional[DownloadKind] = None
    file_url: Optional[str] = Field(default=None, min_length=1)
    file_name: Optional[str] = None
    file_size: Optional[str] = None
