from __future__ import annotations

import re
import unicodedata

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.imatrix.api import ApiError

MAX_SLUG_ATTEMPTS = 100
MAX_SLUG_LENGTH = 200


class SlugConflict(ApiError):
    def __init__(self, base: str) -> None:
        super().__init__(409, f"Could not allocate a unique slug for {base!r}")
        self.base = base


def slugify(text: str) -> str:
    """
    URL-safe slug: ASCII only, lower-case, hyphen separated.

    "Access Control + Attendance" -> "access-control-attendance"
    """
    value = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^a-z0-9\s-]", "", value.lower())
    value = re.sub(r"[-\s]+", "-", value).strip("-")
    return value[:MAX_SLUG_LENGTH].rstrip("-")


def _slug_taken(s: Session, model: type, slug: str, exclude_id: int | None) -> bool:
    stmt = select(model.id).where(model.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)
    return s.execute(stmt.limit(1)).first() is not None


def unique_slug(s: Session, model: type, text: str, exclude_id: int | None = None) -> str:
    """
    Slug for ``text`` that no other row of ``model`` uses.

    Tries the plain slug, then ``-1``, ``-2``... up to MAX_SLUG_ATTEMPTS candidates.
    Not safe against concurrent writers; the unique constraint on ``slug`` is the
    final arbiter (surfaced as 409 by the IntegrityError handler).
    """
    base = slugify(text) or model.__name__.lower()
    if not _slug_taken(s, model, base, exclude_id):
        return base

    for counter in range(1, MAX_SLUG_ATTEMPTS):
        candidate = f"{base}-{counter}"
        if not _slug_taken(s, model, candidate, exclude_id):
            return candidate

    raise SlugConflict(base)
