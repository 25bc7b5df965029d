from __future__ import annotations

from flask import Blueprint, g

from app.imatrix.api import dump, dump_many, get_or_404, ok, parse_body
from app.imatrix.db import db_session
from app.imatrix.models import User
from app.imatrix.modules.categories.models import Category
from app.imatrix.modules.categories.schemas import CategoryIn, CategoryOut
from app.imatrix.modules.categories.service import create_category, delete_category, update_category
from app.imatrix.rbac import require_role

bp = Blueprint("categories", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


@bp.get("")
def categories_list():
    s = db_session()
    categories = s.query(Category).order_by(Category.name.asc()).all()
    return ok(dump_many(CategoryOut, categories))


@bp.get("/id/<int:category_id>")
def categories_detail(category_id: int):
    s = db_session()
    return ok(dump(CategoryOut, get_or_404(s, Category, category_id, "Category")))


@bp.post("")
@require_role("ADMIN", "EDITOR")
def categories_create():
    s = db_session()
    payload = parse_body(CategoryIn)
    category = create_category(s, payload.name, _current_user())
    return ok(dump(CategoryOut, category), status=201)


@bp.patch("/<int:category_id>")
@require_role("ADMIN", "EDITOR")
def categories_update(category_id: int):
    s = db_session()
    category = get_or_404(s, Category, category_id, "Category")
    payload = parse_body(CategoryIn)
    category = update_category(s, category, payload.name, _current_user())
    return ok(dump(CategoryOut, category))


@bp.delete("/<int:category_id>")
@require_role("ADMIN")
def categories_delete(category_id: int):
    s = db_session()
    category = get_or_404(s, Category, category_id, "Category")
    delete_category(s, category, _current_user())
    return ok(message="Category deleted")
