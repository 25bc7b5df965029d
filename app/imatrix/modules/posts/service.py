from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.imatrix.api import ApiError
from app.imatrix.audit import audit_log
from app.imatrix.modules.categories.models import Category
from app.imatrix.modules.posts.models import Post
from app.imatrix.slugs import unique_slug

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.imatrix.models import User
    from app.imatrix.modules.posts.schemas import PostIn


def resolve_categories(s: "Session", category_ids: list[int]) -> list[Category]:
    """Load categories by id; unknown ids are a client error, not silently dropped."""
    wanted = list(dict.fromkeys(category_ids))
    if not wanted:
        return []
    found = s.query(Category).filter(Category.id.in_(wanted)).all()
    by_id = {c.id: c for c in found}
    missing = [cid for cid in wanted if cid not in by_id]
    if missing:
        raise ApiError(400, f"Unknown category ids: {', '.join(str(m) for m in missing)}")
    return [by_id[cid] for cid in wanted]


def create_post(s: "Session", payload: "PostIn", user: "User") -> Post:
    post = Post(
        title=payload.title,
        slug=unique_slug(s, Post, payload.title),
        body=payload.body,
        excerpt=payload.excerpt,
        published=payload.published,
    )
    if payload.category_ids:
        post.categories = resolve_categories(s, payload.category_ids)
    s.add(post)
    s.commit()

    audit_log(user.email, "CREATE", "Post", post.id, {"title": post.title})
    return post


def update_post(s: "Session", post: Post, changes: dict[str, Any], user: "User") -> Post:
    category_ids = changes.pop("category_ids", None)
    if "title" in changes:
        post.slug = unique_slug(s, Post, changes["title"], exclude_id=post.id)
    for field, value in changes.items():
        setattr(post, field, value)
    # an explicit list (even empty) replaces the set
    if category_ids is not None:
        post.categories = resolve_categories(s, category_ids)
    s.commit()

    audit_log(user.email, "UPDATE", "Post", post.id, {"title": post.title})
    return post


def delete_post(s: "Session", post: Post, user: "User") -> None:
    post_id, title = post.id, post.title
    s.delete(post)
    s.commit()

    audit_log(user.email, "DELETE", "Post", post_id, {"title": title})
