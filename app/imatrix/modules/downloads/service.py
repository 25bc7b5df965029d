from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import current_app

from app.imatrix.audit import audit_log
from app.imatrix.modules.downloads.models import Download
from app.imatrix.storage import discard_keys, storage_from_config
from app.imatrix.uploads import UploadedFile, build_upload_key, human_file_size, public_url

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.imatrix.models import User
    from app.imatrix.modules.downloads.schemas import DownloadIn, DownloadUploadIn


def create_download(s: "Session", payload: "DownloadIn", user: "User") -> Download:
    download = Download(
        title=payload.title,
        description=payload.description,
        kind=payload.kind,
        file_url=payload.file_url,
        file_name=payload.file_name,
        file_size=payload.file_size,
    )
    s.add(download)
    s.commit()

    audit_log(user.email, "CREATE", "Download", download.id, {"title": download.title})
    return download


def upload_download(s: "Session", upload: UploadedFile, payload: "DownloadUploadIn", user: "User") -> Download:
    storage_key = f"downloads/{build_upload_key(upload.filename)}"
    storage = storage_from_config(current_app.config)
    storage.put_bytes(storage_key, upload.data, content_type=upload.content_type)

    download = Download(
        title=payload.title,
        description=payload.description,
        kind=payload.kind,
        file_url=public_url(storage_key),
        file_name=upload.filename,
        file_size=human_file_size(upload.size),
        storage_key=storage_key,
    )
    s.add(download)
    try:
        s.commit()
    except Exception:
        s.rollback()
        discard_keys(storage, storage_key)
        raise

    audit_log(
        user.email, "CREATE", "Download", download.id, {"title": download.title, "fileName": download.file_name}
    )
    return download


def update_download(s: "Session", download: Download, changes: dict[str, Any], user: "User") -> Download:
    for field, value in changes.items():
        setattr(download, field, value)
    s.commit()

    audit_log(user.email, "UPDATE", "Download", download.id, {"title": download.title})
    return download


def delete_download(s: "Session", download: Download, user: "User") -> None:
    download_id, title, storage_key = download.id, download.title, download.storage_key
    s.delete(download)
    s.commit()

    discard_keys(storage_from_config(current_app.config), storage_key)

    audit_log(user.email, "DELETE", "Download", download_id, {"title": title})
