from __future__ import annotations

from flask import Blueprint, g, request
from werkzeug.security import generate_password_hash

from app.imatrix.api import ApiError, dump, dump_many, get_or_404, ok, parse_body, query_limit
from app.imatrix.audit import audit_log
from app.imatrix.db import db_session
from app.imatrix.models import AuditLog, User
from app.imatrix.rbac import require_role
from app.imatrix.schemas import AuditLogOut, RoleUpdate, UserOut, UserUpdate

bp = Blueprint("admin", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


# ---------- Accounts ----------
@bp.get("/auth/users")
@require_role("ADMIN")
def users_list():
    s = db_session()
    users = s.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return ok(dump_many(UserOut, users))


@bp.get("/auth/users/id/<int:user_id>")
@require_role("ADMIN")
def users_detail(user_id: int):
    s = db_session()
    return ok(dump(UserOut, get_or_404(s, User, user_id, "User")))


@bp.patch("/auth/users/<int:user_id>")
@require_role("ADMIN")
def users_update(user_id: int):
    s = db_session()
    u = _current_user()
    user = get_or_404(s, User, user_id, "User")
    changes = parse_body(UserUpdate).changes()

    new_email = changes.get("email")
    if new_email:
        new_email = new_email.lower()
        clash = s.query(User).filter(User.email == new_email, User.id != user.id).one_or_none()
        if clash:
            raise ApiError(400, "User already exists")
        changes["email"] = new_email

    password = changes.pop("password", None)
    for field, value in changes.items():
        setattr(user, field, value)
    if password:
        user.password_hash = generate_password_hash(password)
    s.commit()

    meta = dict(changes)
    if password:
        meta["passwordReset"] = True
    audit_log(u.email, "UPDATE", "User", user.id, meta)
    return ok(dump(UserOut, user))


@bp.patch("/auth/users/<int:user_id>/role")
@require_role("ADMIN")
def users_update_role(user_id: int):
    s = db_session()
    u = _current_user()
    user = get_or_404(s, User, user_id, "User")
    payload = parse_body(RoleUpdate)

    user.role = payload.role
    s.commit()

    audit_log(u.email, "UPDATE", "User", user.id, {"newRole": payload.role})
    return ok(dump(UserOut, user))


@bp.delete("/auth/users/<int:user_id>")
@require_role("ADMIN")
def users_delete(user_id: int):
    s = db_session()
    u = _current_user()
    if user_id == u.id:
        raise ApiError(400, "Cannot delete your own account")

    user = get_or_404(s, User, user_id, "User")
    email = user.email
    s.delete(user)
    s.commit()

    audit_log(u.email, "DELETE", "User", user_id, {"email": email})
    return ok(message="User deleted")


# ---------- Audit ----------
@bp.get("/audit")
@require_role("ADMIN")
def audit_list():
    """
    Audit trail, newest first, with simple filters:
    - actor (case-insensitive contains, on the actor email)
    - entity / action (exact)
    """
    s = db_session()
    actor = (request.args.get("actor") or "").strip()
    entity = (request.args.get("entity") or "").strip()
    action = (request.args.get("action") or "").strip()

    q = s.query(AuditLog)
    if actor:
        q = q.filter(AuditLog.actor_email.ilike(f"%{actor}%"))
    if entity:
        q = q.filter(AuditLog.entity == entity)
    if action:
        q = q.filter(AuditLog.action == action)

    logs = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(query_limit(100)).all()
    return ok(dump_many(AuditLogOut, logs))
