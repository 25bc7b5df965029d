from __future__ import annotations

from flask import Blueprint, current_app, g, request

from app.imatrix.api import dump, dump_many, get_or_404, ok, parse_body, query_limit
from app.imatrix.db import db_session
from app.imatrix.models import User
from app.imatrix.modules.media.models import Media
from app.imatrix.modules.media.schemas import AttachmentIn, MediaOut, MediaUpdate, MediaUploadIn
from app.imatrix.modules.media.service import attach_media, delete_media, detach_media, update_media, upload_media
from app.imatrix.rbac import require_role
from app.imatrix.schemas import MediaSummary
from app.imatrix.uploads import MEDIA_CONTENT_TYPES, MEDIA_EXTENSIONS, read_upload

bp = Blueprint("media", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


@bp.get("")
@require_role("ADMIN", "EDITOR")
def media_list():
    s = db_session()
    media_type = (request.args.get("type") or "").strip()
    search = (request.args.get("search") or "").strip()

    q = s.query(Media)
    if media_type:
        q = q.filter(Media.type == media_type)
    if search:
        like = f"%{search}%"
        q = q.filter((Media.file_name.ilike(like)) | (Media.alt.ilike(like)))

    items = q.order_by(Media.created_at.desc(), Media.id.desc()).limit(query_limit()).all()
    return ok(dump_many(MediaOut, items))


@bp.get("/id/<int:media_id>")
@require_role("ADMIN", "EDITOR")
def media_detail(media_id: int):
    s = db_session()
    return ok(dump(MediaOut, get_or_404(s, Media, media_id, "Media")))


@bp.post("/upload")
@require_role("ADMIN", "EDITOR")
def media_upload():
    s = db_session()
    upload = read_upload(
        max_bytes=int(current_app.config["MAX_FILE_SIZE"]),
        content_types=MEDIA_CONTENT_TYPES,
        extensions=MEDIA_EXTENSIONS,
    )
    payload = parse_body(MediaUploadIn)
    media = upload_media(s, upload, payload, _current_user())
    return ok(dump(MediaOut, media), status=201)


@bp.post("/attach")
@require_role("ADMIN", "EDITOR")
def media_attach():
    s = db_session()
    payload = parse_body(AttachmentIn)
    resource = attach_media(s, payload, _current_user())
    data = {
        "resourceType": payload.resource_type,
        "resourceId": resource.id,
        "media": dump_many(MediaSummary, resource.media),
    }
    return ok(data, message="Media attached successfully")


@bp.delete("/detach")
@require_role("ADMIN", "EDITOR")
def media_detach():
    s = db_session()
    payload = parse_body(AttachmentIn)
    resource = detach_media(s, payload, _current_user())
    data = {
        "resourceType": payload.resource_type,
        "resourceId": resource.id,
        "media": dump_many(MediaSummary, resource.media),
    }
    return ok(data, message="Media detached successfully")


@bp.patch("/<int:media_id>")
@require_role("ADMIN", "EDITOR")
def media_update(media_id: int):
    s = db_session()
    media = get_or_404(s, Media, media_id, "Media")
    changes = parse_body(MediaUpdate).changes()
    media = update_media(s, media, changes, _current_user())
    return ok(dump(MediaOut, media))


@bp.delete("/<int:media_id>")
@require_role("ADMIN", "EDITOR")
def media_delete(media_id: int):
    s = db_session()
    media = get_or_404(s, Media, media_id, "Media")
    delete_media(s, media, _current_user())
    return ok(message="Media deleted")
