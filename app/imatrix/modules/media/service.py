from __future__ import annotations

import io
import logging
import os
from typing import TYPE_CHECKING, Any

from flask import current_app
from PIL import Image

from app.imatrix.api import ApiError, get_or_404
from app.imatrix.audit import audit_log
from app.imatrix.modules.media.models import Media
from app.imatrix.modules.posts.models import Post
from app.imatrix.modules.products.models import Product
from app.imatrix.modules.solutions.models import Solution
from app.imatrix.storage import discard_keys, storage_from_config
from app.imatrix.uploads import UploadedFile, build_upload_key, public_url

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.imatrix.models import User
    from app.imatrix.modules.media.schemas import AttachmentIn, MediaUploadIn

logger = logging.getLogger(__name__)

THUMBNAIL_SIZE = (300, 300)
THUMBNAIL_QUALITY = 80

# resourceType -> (model, label); every model has a `media` collection
RESOURCES: dict[str, tuple[type, str]] = {
    "product": (Product, "Product"),
    "post": (Post, "Post"),
    "solution": (Solution, "Solution"),
}


def infer_media_type(content_type: str, requested: str | None) -> str:
    if content_type.startswith("image/"):
        return "image"
    if content_type.startswith("video/"):
        return "video"
    return requested or "file"


def make_thumbnail(data: bytes) -> bytes:
    """Fit inside 300x300 (never enlarged), re-encoded as JPEG."""
    with Image.open(io.BytesIO(data)) as im:
        im = im.convert("RGB")
        im.thumbnail(THUMBNAIL_SIZE)
        buf = io.BytesIO()
        im.save(buf, format="JPEG", quality=THUMBNAIL_QUALITY)
        return buf.getvalue()


def thumbnail_key_for(storage_key: str) -> str:
    return f"thumb-{os.path.splitext(storage_key)[0]}.jpg"


def upload_media(s: "Session", upload: UploadedFile, payload: "MediaUploadIn", user: "User") -> Media:
    storage = storage_from_config(current_app.config)
    storage_key = build_upload_key(upload.filename)
    storage.put_bytes(storage_key, upload.data, content_type=upload.content_type)

    media_type = infer_media_type(upload.content_type, payload.type)
    thumb_key = None
    if media_type == "image":
        try:
            thumb_key = thumbnail_key_for(storage_key)
            storage.put_bytes(thumb_key, make_thumbnail(upload.data), content_type="image/jpeg")
        except (OSError, ValueError, Image.DecompressionBombError):
            logger.exception("Thumbnail generation failed for %s", storage_key)
            thumb_key = None

    media = Media(
        url=public_url(storage_key),
        file_name=upload.filename,
        type=media_type,
        alt=payload.alt or upload.filename,
        caption=payload.caption,
        storage_key=storage_key,
        content_type=upload.content_type,
        size_bytes=upload.size,
        thumbnail_key=thumb_key,
        thumbnail_url=public_url(thumb_key) if thumb_key else None,
    )
    s.add(media)
    try:
        s.commit()
    except Exception:
        s.rollback()
        discard_keys(storage, storage_key, thumb_key)
        raise

    audit_log(user.email, "CREATE", "Media", media.id, {"fileName": media.file_name, "type": media.type})
    return media


def update_media(s: "Session", media: Media, changes: dict[str, Any], user: "User") -> Media:
    for field, value in changes.items():
        setattr(media, field, value)
    s.commit()

    audit_log(user.email, "UPDATE", "Media", media.id, {"fileName": media.file_name, "fields": sorted(changes)})
    return media


def delete_media(s: "Session", media: Media, user: "User") -> None:
    keys = (media.storage_key, media.thumbnail_key)
    media_id, file_name = media.id, media.file_name
    s.delete(media)
    s.commit()

    # files go only after the row is gone
    discard_keys(storage_from_config(current_app.config), *keys)

    audit_log(user.email, "DELETE", "Media", media_id, {"fileName": file_name})


def _resolve(s: "Session", payload: "AttachmentIn") -> tuple[Media, Any]:
    media = get_or_404(s, Media, payload.media_id, "Media")
    if payload.resource_type not in RESOURCES:
        raise ApiError(400, "Invalid resource type")
    model, label = RESOURCES[payload.resource_type]
    return media, get_or_404(s, model, payload.resource_id, label)


def attach_media(s: "Session", payload: "AttachmentIn", user: "User") -> Any:
    """Idempotent: attaching twice leaves one link."""
    media, resource = _resolve(s, payload)
    if media not in resource.media:
        resource.media.append(media)
    s.commit()

    audit_log(
        user.email,
        "ATTACH",
        "Media",
        media.id,
        {"resourceType": payload.resource_type, "resourceId": payload.resource_id, "fileName": media.file_name},
    )
    return resource


def detach_media(s: "Session", payload: "AttachmentIn", user: "User") -> Any:
    media, resource = _resolve(s, payload)
    if media in resource.media:
        resource.media.remove(media)
    s.commit()

    audit_log(
        user.email,
        "DETACH",
        "Media",
        media.id,
        {"resourceType": payload.resource_type, "resourceId": payload.resource_id, "fileName": media.file_name},
    )
    return resource
