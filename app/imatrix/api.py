"""
JSON envelope helpers shared by every blueprint.

Responses always have the shape ``{"ok": bool, "data"?, "error"?, "message"?}``.
Handlers raise :class:`ApiError` for expected failures; everything else falls
through to the error handlers registered in :func:`register_error_handlers`.
"""

from __future__ import annotations

from typing import Any, TypeVar

from flask import Flask, Response, current_app, g, jsonify, request
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.exceptions import HTTPException

SchemaT = TypeVar("SchemaT", bound=BaseModel)

DEFAULT_LIMIT = 50
MAX_LIMIT = 500


class ApiError(Exception):
    def __init__(self, status: int, error: Any, **extra: Any) -> None:
        super().__init__(error if isinstance(error, str) else repr(error))
        self.status = status
        self.error = error
        self.extra = extra


def ok(data: Any = None, *, status: int = 200, message: str | None = None) -> tuple[Response, int]:
    body: dict[str, Any] = {"ok": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return jsonify(body), status


def fail(error: Any, status: int, **extra: Any) -> tuple[Response, int]:
    return jsonify({"ok": False, "error": error, **extra}), status


def dump(schema: type[BaseModel], obj: Any) -> dict[str, Any]:
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


def dump_many(schema: type[BaseModel], objs: list[Any]) -> list[dict[str, Any]]:
    return [dump(schema, o) for o in objs]


def parse_body(schema: type[SchemaT]) -> SchemaT:
    """Validate the JSON body (or form fields for multipart requests)."""
    if request.is_json:
        payload = request.get_json(silent=True)
        if payload is None:
            raise ApiError(400, "Malformed JSON body")
        if not isinstance(payload, dict):
            raise ApiError(400, "JSON body must be an object")
    else:
        # browsers send empty strings for blank form fields
        payload = {k: v for k, v in request.form.items() if v != ""}
    return schema.model_validate(payload)


def query_limit(default: int = DEFAULT_LIMIT) -> int:
    raw = (request.args.get("limit") or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ApiError(400, "limit must be an integer") from None
    return max(1, min(value, MAX_LIMIT))


def query_flag(name: str) -> bool | None:
    raw = (request.args.get(name) or "").strip().lower()
    if raw == "true":
        return True
    if raw == "false":
        return False
    return None


def get_or_404(s: Session, model: type, obj_id: int, label: str | None = None) -> Any:
    obj = s.get(model, obj_id)
    if obj is None:
        raise ApiError(404, f"{label or model.__name__} not found")
    return obj


def validation_errors(exc: ValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(p) for p in err.get("loc", ())),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]


def _is_production() -> bool:
    return (current_app.config.get("ENV") or "").strip().lower() in ("prod", "production")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ApiError)
    def _api_error(e: ApiError):  # type: ignore[no-redef]
        return fail(e.error, e.status, **e.extra)

    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):  # type: ignore[no-redef]
        return fail(validation_errors(e), 400)

    @app.errorhandler(IntegrityError)
    def _integrity_error(e: IntegrityError):  # type: ignore[no-redef]
        app.logger.warning("Integrity error (request_id=%s): %s", getattr(g, "request_id", None), e.orig)
        return fail("Conflict with an existing record", 409)

    @app.errorhandler(404)
    def _err_404(e):  # type: ignore[no-redef]
        return fail("Route not found", 404, path=request.path)

    @app.errorhandler(405)
    def _err_405(e):  # type: ignore[no-redef]
        return fail("Method not allowed", 405)

    @app.errorhandler(413)
    def _err_413(e):  # type: ignore[no-redef]
        return fail("File too large", 413)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):  # type: ignore[no-redef]
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _err_500(e: Exception):  # type: ignore[no-redef]
        app.logger.exception(
            "Unhandled error %s %s (request_id=%s)", request.method, request.path, getattr(g, "request_id", None)
        )
        return fail("Internal server error" if _is_production() else str(e), 500)
