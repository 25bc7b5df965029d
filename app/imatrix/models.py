from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ROLES = ("ADMIN", "EDITOR", "VIEWER")


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="EDITOR")  # ADMIN, EDITOR, VIEWER
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class AuditLog(Base):
    """
    Append-only record of content changes and sign-ins.
    Rows are written outside the request transaction (see app.imatrix.audit).
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("idx_audit_logs_created_at", "created_at"),
        Index("idx_audit_logs_entity", "entity"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    request_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    actor_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    action: Mapped[str] = mapped_column(String(32), nullable=False)  # e.g. "CREATE"
    entity: Mapped[str] = mapped_column(String(64), nullable=False)  # e.g. "Product"
    entity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)  # string for flexibility (int/email)

    meta_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    client_ip: Mapped[str | None] = mapped_column(String(64), nullable=True)

    @property
    def meta(self) -> Any:
        if not self.meta_json:
            return None
        try:
            return json.loads(self.meta_json)
        except ValueError:
            return self.meta_json


# Ensure module models are imported so Base.metadata includes their tables.
# (Kept at bottom to avoid circular imports.)
from app.imatrix.modules.media.models import Media  # noqa: E402,F401
from app.imatrix.modules.categories.models import Category  # noqa: E402,F401
from app.imatrix.modules.posts.models import Post, post_categories, post_media  # noqa: E402,F401
from app.imatrix.modules.products.models import Product, product_media  # noqa: E402,F401
from app.imatrix.modules.solutions.models import Solution, solution_media  # noqa: E402,F401
from app.imatrix.modules.downloads.models import Download  # noqa: E402,F401
from app.imatrix.modules.contact.models import ContactMessage  # noqa: E402,F401
