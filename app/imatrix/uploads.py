"""
Multipart upload helpers shared by media and downloads.
"""

from __future__ import annotations

import os
import secrets
import time
from dataclasses import dataclass

from flask import current_app, request
from werkzeug.utils import secure_filename

from app.imatrix.api import ApiError

MEDIA_CONTENT_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/bmp",
        "application/pdf",
        "video/mp4",
    }
)
MEDIA_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".pdf", ".mp4"})

DOWNLOAD_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/zip",
        "application/x-zip-compressed",
        "application/octet-stream",
    }
)
DOWNLOAD_EXTENSIONS = frozenset({".pdf", ".xls", ".xlsx", ".doc", ".docx", ".zip"})


@dataclass(frozen=True)
class UploadedFile:
    filename: str  # as sent by the client
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename)[1].lower()


def read_upload(
    *,
    field: str = "file",
    max_bytes: int,
    content_types: frozenset[str],
    extensions: frozenset[str],
) -> UploadedFile:
    f = request.files.get(field)
    if not f or not f.filename:
        raise ApiError(400, "No file uploaded")

    upload = UploadedFile(
        filename=f.filename,
        content_type=(f.mimetype or "application/octet-stream").lower(),
        data=f.read(),
    )
    if upload.content_type not in content_types and upload.extension not in extensions:
        raise ApiError(400, f"File type not allowed: {upload.content_type}")
    if upload.size > max_bytes:
        raise ApiError(413, "File too large", maxBytes=max_bytes)
    return upload


def build_upload_key(filename: str) -> str:
    """`<epoch ms>-<random>-<filename>`, unique enough for a flat upload dir."""
    safe = secure_filename(filename) or "upload.bin"
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}-{safe}"


def public_url(key: str) -> str:
    base = (current_app.config.get("PUBLIC_BASE_URL") or "").rstrip("/")
    return f"{base}/uploads/{key}"


def human_file_size(size_bytes: int) -> str:
    mb = size_bytes / (1024 * 1024)
    # compare the displayed value so 1 MB + a few bytes still reads "1024.00 KB"
    if round(mb, 2) > 1:
        return f"{mb:.2f} MB"
    return f"{size_bytes / 1024:.2f} KB"
