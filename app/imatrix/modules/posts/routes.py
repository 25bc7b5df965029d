from __future__ import annotations

from flask import Blueprint, g, request

from app.imatrix.api import ApiError, dump, dump_many, get_or_404, ok, parse_body, query_flag, query_limit
from app.imatrix.db import db_session
from app.imatrix.models import User
from app.imatrix.modules.categories.models import Category
from app.imatrix.modules.posts.models import Post
from app.imatrix.modules.posts.schemas import PostIn, PostOut, PostUpdate
from app.imatrix.modules.posts.service import create_post, delete_post, update_post
from app.imatrix.rbac import require_role

bp = Blueprint("posts", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


def _sees_drafts() -> bool:
    # any signed-in user; anonymous callers only see published posts
    return getattr(g, "current_user", None) is not None


@bp.get("")
def posts_list():
    s = db_session()
    search = (request.args.get("search") or "").strip()
    category_raw = (request.args.get("categoryId") or "").strip()

    q = s.query(Post)

    if not _sees_drafts():
        q = q.filter(Post.published.is_(True))
    else:
        published = query_flag("published")
        if published is not None:
            q = q.filter(Post.published.is_(published))

    if search:
        like = f"%{search}%"
        q = q.filter((Post.title.ilike(like)) | (Post.body.ilike(like)))

    if category_raw:
        try:
            category_id = int(category_raw)
        except ValueError:
            raise ApiError(400, "categoryId must be an integer") from None
        q = q.filter(Post.categories.any(Category.id == category_id))

    posts = q.order_by(Post.created_at.desc(), Post.id.desc()).limit(query_limit()).all()
    return ok(dump_many(PostOut, posts))


@bp.get("/id/<int:post_id>")
def posts_detail(post_id: int):
    s = db_session()
    post = get_or_404(s, Post, post_id, "Post")
    if not post.published and not _sees_drafts():
        raise ApiError(404, "Post not found")
    return ok(dump(PostOut, post))


@bp.get("/<slug>")
def posts_by_slug(slug: str):
    s = db_session()
    q = s.query(Post).filter(Post.slug == slug)
    if not _sees_drafts():
        q = q.filter(Post.published.is_(True))
    post = q.one_or_none()
    if not post:
        raise ApiError(404, "Post not found")
    return ok(dump(PostOut, post))


@bp.post("")
@require_role("ADMIN", "EDITOR")
def posts_create():
    s = db_session()
    payload = parse_body(PostIn)
    post = create_post(s, payload, _current_user())
    return ok(dump(PostOut, post), status=201)


@bp.patch("/<int:post_id>")
@require_role("ADMIN", "EDITOR")
def posts_update(post_id: int):
    s = db_session()
    post = get_or_404(s, Post, post_id, "Post")
    changes = parse_body(PostUpdate).changes()
    post = update_post(s, post, changes, _current_user())
    return ok(dump(PostOut, post))


@bp.delete("/<int:post_id>")
@require_role("ADMIN")
def posts_delete(post_id: int):
    s = db_session()
    post = get_or_404(s, Post, post_id, "Post")
    delete_post(s, post, _current_user())
    return ok(message="Post deleted")
