from __future__ import annotations

from flask import Blueprint, g

from app.imatrix.api import dump, dump_many, get_or_404, ok, parse_body, query_limit
from app.imatrix.db import db_session
from app.imatrix.models import User
from app.imatrix.modules.contact.models import ContactMessage
from app.imatrix.modules.contact.schemas import ContactIn, ContactMessageOut
from app.imatrix.modules.contact.service import delete_message, submit_message
from app.imatrix.rbac import require_role

bp = Blueprint("contact", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


@bp.post("")
def contact_submit():
    s = db_session()
    payload = parse_body(ContactIn)
    submit_message(s, payload)
    return ok(status=201, message="Message sent successfully")


@bp.get("")
@require_role("ADMIN", "EDITOR")
def contact_list():
    s = db_session()
    messages = (
        s.query(ContactMessage)
        .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
        .limit(query_limit())
        .all()
    )
    return ok(dump_many(ContactMessageOut, messages))


@bp.get("/<int:message_id>")
@require_role("ADMIN", "EDITOR")
def contact_detail(message_id: int):
    s = db_session()
    return ok(dump(ContactMessageOut, get_or_404(s, ContactMessage, message_id, "Message")))


@bp.delete("/<int:message_id>")
@require_role("ADMIN")
def contact_delete(message_id: int):
    s = db_session()
    msg = get_or_404(s, ContactMessage, message_id, "Message")
    delete_message(s, msg, _current_user())
    return ok(message="Message deleted")
