from __future__ import annotations

import json
import logging
from typing import Any

from flask import current_app, g, has_request_context, request

from app.imatrix.db import session_scope
from app.imatrix.models import AuditLog

logger = logging.getLogger(__name__)


def audit_log(
    actor_email: str | None,
    action: str,
    entity: str,
    entity_id: int | str | None = None,
    meta: dict[str, Any] | None = None,
) -> bool:
    """
    Fire-and-forget audit append.

    Written in its own session so it never joins the caller's transaction.
    Failures are logged and swallowed; returns whether the row was stored.
    """
    request_id = None
    client_ip = None
    if has_request_context():
        request_id = getattr(g, "request_id", None)
        client_ip = request.remote_addr

    try:
        with session_scope(current_app) as s:
            s.add(
                AuditLog(
                    request_id=request_id,
                    actor_email=actor_email,
                    action=action,
                    entity=entity,
                    entity_id=str(entity_id) if entity_id is not None else None,
                    meta_json=json.dumps(meta, sort_keys=True, default=str) if meta else None,
                    client_ip=client_ip,
                )
            )
        return True
    except Exception:
        logger.exception("Audit log failed (action=%s entity=%s entity_id=%s)", action, entity, entity_id)
        return False
