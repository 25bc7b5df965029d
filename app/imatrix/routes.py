import time
from datetime import datetime

from flask import Blueprint, current_app, send_file

from app.imatrix.api import ApiError
from app.imatrix.storage import StorageError, storage_from_config

bp = Blueprint("routes", __name__)

API_VERSION = "1.0.0"


@bp.get("/")
def index():
    return {
        "ok": True,
        "message": "iMatrix API Server",
        "version": API_VERSION,
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "endpoints": {
            "auth": "/auth",
            "posts": "/posts",
            "products": "/products",
            "solutions": "/solutions",
            "categories": "/categories",
            "downloads": "/downloads",
            "media": "/media",
            "contact": "/contact",
            "audit": "/audit",
            "health": "/health",
        },
    }


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {
        "ok": True,
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "uptime": round(time.monotonic() - current_app.extensions["started_at"], 3),
        "environment": current_app.config.get("ENV") or "development",
    }


@bp.get("/healthz")
def healthz():
    """
    Fast health check for k8s/DO probes. No DB access, minimal overhead.
    """
    return "ok", 200


@bp.get("/uploads/<path:key>")
def uploads(key: str):
    storage = storage_from_config(current_app.config)
    try:
        if not storage.exists(key):
            raise ApiError(404, "File not found")
        fobj = storage.open(key)
    except StorageError:
        raise ApiError(404, "File not found") from None
    return send_file(fobj, download_name=key.rsplit("/", 1)[-1], max_age=86400, conditional=False)
