"""initial schema

Revision ID: 4d1e7a2b9c30
Revises:
Create Date: 2026-10-19 09:12:41.208117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4d1e7a2b9c30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    cols = [sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now())]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()))
    return cols


def _junction(name: str, owner_col: str, owner_table: str, other_col: str, other_table: str) -> None:
    op.create_table(
        name,
        sa.Column(owner_col, sa.Integer(), sa.ForeignKey(f"{owner_table}.id", ondelete="CASCADE"), primary_key=True),
        sa.Column(other_col, sa.Integer(), sa.ForeignKey(f"{other_table}.id", ondelete="CASCADE"), primary_key=True),
    )


def upgrade() -> None:
    """Create users, audit log, content tables and their media/category links."""
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = set(inspector.get_table_names())

    if "users" not in existing_tables:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("email", sa.String(320), nullable=False, unique=True),
            sa.Column("name", sa.String(255), nullable=True),
            sa.Column("password_hash", sa.String(255), nullable=False),
            sa.Column("role", sa.String(16), nullable=False, server_default="EDITOR"),
            sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            *_timestamps(),
        )

    if "audit_logs" not in existing_tables:
        op.create_table(
            "audit_logs",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("request_id", sa.String(64), nullable=True),
            sa.Column("actor_email", sa.String(320), nullable=True),
            sa.Column("action", sa.String(32), nullable=False),
            sa.Column("entity", sa.String(64), nullable=False),
            sa.Column("entity_id", sa.String(64), nullable=True),
            sa.Column("meta_json", sa.Text(), nullable=True),
            sa.Column("client_ip", sa.String(64), nullable=True),
        )
        op.create_index("idx_audit_logs_created_at", "audit_logs", ["created_at"])
        op.create_index("idx_audit_logs_entity", "audit_logs", ["entity"])

    if "media" not in existing_tables:
        op.create_table(
            "media",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("url", sa.Text(), nullable=False),
            sa.Column("file_name", sa.String(255), nullable=False),
            sa.Column("type", sa.String(16), nullable=False, server_default="file"),
            sa.Column("alt", sa.String(512), nullable=True),
            sa.Column("caption", sa.Text(), nullable=True),
            sa.Column("storage_key", sa.String(512), nullable=False),
            sa.Column("content_type", sa.String(128), nullable=False, server_default="application/octet-stream"),
            sa.Column("size_bytes", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("thumbnail_key", sa.String(512), nullable=True),
            sa.Column("thumbnail_url", sa.Text(), nullable=True),
            *_timestamps(),
        )
        op.create_index("idx_media_type", "media", ["type"])
        op.create_index("idx_media_created_at", "media", ["created_at"])

    if "categories" not in existing_tables:
        op.create_table(
            "categories",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("slug", sa.String(255), nullable=False, unique=True),
            *_timestamps(),
        )

    if "posts" not in existing_tables:
        op.create_table(
            "posts",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("title", sa.String(255), nullable=False),
            sa.Column("slug", sa.String(255), nullable=False, unique=True),
            sa.Column("body", sa.Text(), nullable=True),
            sa.Column("excerpt", sa.Text(), nullable=True),
            sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
            *_timestamps(),
        )
        op.create_index("idx_posts_published", "posts", ["published"])
        op.create_index("idx_posts_created_at", "posts", ["created_at"])

    if "products" not in existing_tables:
        op.create_table(
            "products",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("slug", sa.String(255), nullable=False, unique=True),
            sa.Column("summary", sa.Text(), nullable=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("specs", sa.JSON(), nullable=True),
            sa.Column("price", sa.String(128), nullable=True),
            sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
            *_timestamps(),
        )
        op.create_index("idx_products_featured_created_at", "products", ["featured", "created_at"])

    if "solutions" not in existing_tables:
        op.create_table(
            "solutions",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("slug", sa.String(255), nullable=False, unique=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("benefits", sa.JSON(), nullable=True),
            sa.Column("features", sa.JSON(), nullable=True),
            *_timestamps(),
        )

    if "downloads" not in existing_tables:
        op.create_table(
            "downloads",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("title", sa.String(255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("kind", sa.String(32), nullable=False, server_default="manual"),
            sa.Column("file_url", sa.Text(), nullable=False),
            sa.Column("file_name", sa.String(255), nullable=True),
            sa.Column("file_size", sa.String(32), nullable=True),
            sa.Column("storage_key", sa.String(512), nullable=True),
            *_timestamps(),
        )
        op.create_index("idx_downloads_kind", "downloads", ["kind"])

    if "contact_messages" not in existing_tables:
        op.create_table(
            "contact_messages",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("email", sa.String(320), nullable=False),
            sa.Column("phone", sa.String(64), nullable=True),
            sa.Column("company", sa.String(255), nullable=True),
            sa.Column("message", sa.Text(), nullable=False),
            *_timestamps(updated=False),
        )
        op.create_index("idx_contact_messages_created_at", "contact_messages", ["created_at"])

    if "post_categories" not in existing_tables:
        _junction("post_categories", "post_id", "posts", "category_id", "categories")
    if "post_media" not in existing_tables:
        _junction("post_media", "post_id", "posts", "media_id", "media")
    if "product_media" not in existing_tables:
        _junction("product_media", "product_id", "products", "media_id", "media")
    if "solution_media" not in existing_tables:
        _junction("solution_media", "solution_id", "solutions", "media_id", "media")


def downgrade() -> None:
    """Drop tables in reverse order."""
    op.drop_table("solution_media")
    op.drop_table("product_media")
    op.drop_table("post_media")
    op.drop_table("post_categories")
    op.drop_table("contact_messages")
    op.drop_table("downloads")
    op.drop_table("solutions")
    op.drop_table("products")
    op.drop_table("posts")
    op.drop_table("categories")
    op.drop_table("media")
    op.drop_table("audit_logs")
    op.drop_table("users")
