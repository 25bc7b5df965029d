from __future__ import annotations

import uuid
from datetime import datetime, timedelta

import jwt
from flask import Blueprint, current_app, g, request
from werkzeug.security import check_password_hash, generate_password_hash

from app.imatrix.api import ApiError, dump, ok, parse_body
from app.imatrix.audit import audit_log
from app.imatrix.db import db_session
from app.imatrix.models import User
from app.imatrix.rbac import login_required, require_role
from app.imatrix.schemas import LoginIn, RegisterIn, UserOut

bp = Blueprint("auth", __name__)
_LOGIN_RATE_LIMIT = 5
_LOGIN_RATE_WINDOW = 300  # seconds
_JWT_ALGORITHM = "HS256"


def _login_attempts() -> dict[str, list[datetime]]:
    # per-app so separate app instances (tests, workers) do not share counters
    return current_app.extensions.setdefault("login_attempts", {})


def _check_rate_limit(ip: str) -> bool:
    now = datetime.utcnow()
    cutoff = now - timedelta(seconds=_LOGIN_RATE_WINDOW)
    attempts = _login_attempts()
    attempts[ip] = [t for t in attempts.get(ip, []) if t > cutoff]
    return len(attempts[ip]) >= _LOGIN_RATE_LIMIT


def _record_attempt(ip: str) -> None:
    _login_attempts().setdefault(ip, []).append(datetime.utcnow())


def issue_token(user: User) -> str:
    now = datetime.utcnow()
    claims = {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(hours=int(current_app.config.get("JWT_EXPIRES_HOURS") or 24)),
    }
    return jwt.encode(claims, current_app.config["JWT_SECRET"], algorithm=_JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    return jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=[_JWT_ALGORITHM])


def _bearer_token() -> str | None:
    header = (request.headers.get("Authorization") or "").strip()
    if not header.lower().startswith("bearer "):
        return None
    return header[7:].strip() or None


def load_current_user() -> None:
    """
    Loads g.current_user from the bearer token, if any.
    Also assigns a simple per-request request_id (for audit/log correlation).

    Missing or bad tokens are not rejected here; g.auth_error carries the reason
    for require_role to report when the endpoint needs a user.
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    g.current_user = None
    g.auth_error = None

    token = _bearer_token()
    if not token:
        return

    try:
        claims = decode_token(token)
        user_id = int(claims["id"])
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        g.auth_error = "Invalid token"
        return

    user = db_session().get(User, user_id)
    if not user or not user.is_active:
        g.auth_error = "User not found"
        return
    g.current_user = user


@bp.post("/login")
def login():
    ip = request.remote_addr or "unknown"
    if _check_rate_limit(ip):
        raise ApiError(429, "Too many auth attempts")

    payload = parse_body(LoginIn)
    email = payload.email.lower()
    _record_attempt(ip)

    s = db_session()
    user = s.query(User).filter(User.email == email).one_or_none()
    if not user or not user.is_active or not check_password_hash(user.password_hash, payload.password):
        audit_log(email, "LOGIN_FAILED", "User", email, {"reason": "Invalid credentials"})
        raise ApiError(401, "Invalid credentials")

    _login_attempts().pop(ip, None)
    audit_log(user.email, "LOGIN", "User", user.id)
    return ok({"token": issue_token(user), "user": dump(UserOut, user)})


@bp.get("/me")
@login_required
def me():
    return ok(dump(UserOut, g.current_user))


@bp.post("/register")
@require_role("ADMIN")
def register():
    s = db_session()
    payload = parse_body(RegisterIn)
    email = payload.email.lower()

    if s.query(User).filter(User.email == email).one_or_none():
        raise ApiError(400, "User already exists")

    user = User(
        email=email,
        name=payload.name or None,
        password_hash=generate_password_hash(payload.password),
        role=payload.role,
        is_active=True,
    )
    s.add(user)
    s.commit()

    audit_log(g.current_user.email, "CREATE", "User", user.id, {"newUserEmail": email, "role": user.role})
    return ok(dump(UserOut, user), status=201)
