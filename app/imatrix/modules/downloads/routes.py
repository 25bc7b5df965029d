from __future__ import annotations

from flask import Blueprint, current_app, g, request

from app.imatrix.api import ApiError, dump, dump_many, get_or_404, ok, parse_body, query_limit
from app.imatrix.db import db_session
from app.imatrix.models import User
from app.imatrix.modules.downloads.models import Download
from app.imatrix.modules.downloads.schemas import DownloadIn, DownloadOut, DownloadUpdate, DownloadUploadIn
from app.imatrix.modules.downloads.service import create_download, delete_download, update_download, upload_download
from app.imatrix.rbac import require_role
from app.imatrix.uploads import DOWNLOAD_CONTENT_TYPES, DOWNLOAD_EXTENSIONS, read_upload

bp = Blueprint("downloads", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


@bp.get("")
def downloads_list():
    s = db_session()
    kind = (request.args.get("kind") or "").strip()
    search = (request.args.get("search") or "").strip()

    q = s.query(Download)
    if kind:
        q = q.filter(Download.kind == kind)
    if search:
        like = f"%{search}%"
        q = q.filter((Download.title.ilike(like)) | (Download.description.ilike(like)))

    downloads = q.order_by(Download.created_at.desc(), Download.id.desc()).limit(query_limit()).all()
    return ok(dump_many(DownloadOut, downloads))


@bp.get("/id/<int:download_id>")
def downloads_detail(download_id: int):
    s = db_session()
    return ok(dump(DownloadOut, get_or_404(s, Download, download_id, "Download")))


@bp.post("")
@require_role("ADMIN", "EDITOR")
def downloads_create():
    """URL-based download; files hosted here go through /downloads/upload."""
    s = db_session()
    payload = parse_body(DownloadIn)
    if not payload.file_url:
        raise ApiError(400, "fileUrl is required for URL-based downloads")
    download = create_download(s, payload, _current_user())
    return ok(dump(DownloadOut, download), status=201)


@bp.post("/upload")
@require_role("ADMIN", "EDITOR")
def downloads_upload():
    s = db_session()
    upload = read_upload(
        max_bytes=int(current_app.config["MAX_DOWNLOAD_FILE_SIZE"]),
        content_types=DOWNLOAD_CONTENT_TYPES,
        extensions=DOWNLOAD_EXTENSIONS,
    )
    payload = parse_body(DownloadUploadIn)
    download = upload_download(s, upload, payload, _current_user())
    return ok(dump(DownloadOut, download), status=201)


@bp.patch("/<int:download_id>")
@require_role("ADMIN", "EDITOR")
def downloads_update(download_id: int):
    s = db_session()
    download = get_or_404(s, Download, download_id, "Download")
    changes = parse_body(DownloadUpdate).changes()
    download = update_download(s, download, changes, _current_user())
    return ok(dump(DownloadOut, download))


@bp.delete("/<int:download_id>")
@require_role("ADMIN")
def downloads_delete(download_id: int):
    s = db_session()
    download = get_or_404(s, Download, download_id, "Download")
    delete_download(s, download, _current_user())
    return ok(message="Download deleted")
