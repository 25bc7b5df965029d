from __future__ import annotations

from flask import Flask, Response, current_app, request
from flask_cors import CORS

from app.imatrix.api import fail

ALLOWED_METHODS = ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization", "X-Requested-With"]
EXPOSED_HEADERS = ["Content-Range", "X-Content-Range"]


def origin_allowed(origin: str | None) -> bool:
    """Requests without an Origin (curl, server-to-server) are always allowed."""
    if not origin:
        return True
    return origin.rstrip("/") in current_app.config.get("CORS_ORIGINS", ())


def _cors_guard():
    # uploaded files are public to any origin
    if request.path.startswith("/uploads/"):
        return Response(status=204) if request.method == "OPTIONS" else None
    origin = request.headers.get("Origin")
    if not origin_allowed(origin):
        current_app.logger.warning("CORS rejected origin: %s (%s %s)", origin, request.method, request.path)
        message = "Access denied" if current_app.config.get("ENV") in ("prod", "production") else f"Origin {origin} is not allowed"
        return fail("CORS policy violation", 403, message=message)
    if request.method == "OPTIONS":
        # flask-cors fills in the preflight headers on the way out
        return Response(status=204)
    return None


def init_cors(app: Flask) -> None:
    app.before_request(_cors_guard)
    CORS(
        app,
        resources={
            r"/uploads/*": {
                "origins": "*",
                "send_wildcard": True,
                "methods": ["GET", "HEAD", "OPTIONS"],
                "supports_credentials": False,
            },
            r"/*": {
                "origins": list(app.config.get("CORS_ORIGINS", ())),
                "methods": ALLOWED_METHODS,
                "allow_headers": ALLOWED_HEADERS,
                "expose_headers": EXPOSED_HEADERS,
                "supports_credentials": True,
            },
        },
    )
