from __future__ import annotations

from flask import Blueprint, g, request

from app.imatrix.api import ApiError, dump, dump_many, get_or_404, ok, parse_body, query_flag, query_limit
from app.imatrix.db import db_session
from app.imatrix.models import User
from app.imatrix.modules.products.models import Product
from app.imatrix.modules.products.schemas import ProductIn, ProductMediaIn, ProductOut, ProductUpdate
from app.imatrix.modules.products.service import add_product_media, create_product, delete_product, update_product
from app.imatrix.rbac import require_role

bp = Blueprint("products", __name__)


def _current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


@bp.get("")
def products_list():
    s = db_session()
    search = (request.args.get("search") or "").strip()

    q = s.query(Product)
    if query_flag("featured"):
        q = q.filter(Product.featured.is_(True))
    if search:
        like = f"%{search}%"
        q = q.filter((Product.name.ilike(like)) | (Product.summary.ilike(like)))

    products = (
        q.order_by(Product.featured.desc(), Product.created_at.desc(), Product.id.desc())
        .limit(query_limit())
        .all()
    )
    return ok(dump_many(ProductOut, products))


@bp.get("/id/<int:product_id>")
def products_detail(product_id: int):
    s = db_session()
    return ok(dump(ProductOut, get_or_404(s, Product, product_id, "Product")))


@bp.get("/<slug>")
def products_by_slug(slug: str):
    s = db_session()
    product = s.query(Product).filter(Product.slug == slug).one_or_none()
    if not product:
        raise ApiError(404, "Product not found")
    return ok(dump(ProductOut, product))


@bp.post("")
@require_role("ADMIN", "EDITOR")
def products_create():
    s = db_session()
    payload = parse_body(ProductIn)
    product = create_product(s, payload, _current_user())
    return ok(dump(ProductOut, product), status=201)


@bp.patch("/<int:product_id>")
@require_role("ADMIN", "EDITOR")
def products_update(product_id: int):
    s = db_session()
    product = get_or_404(s, Product, product_id, "Product")
    changes = parse_body(ProductUpdate).changes()
    product = update_product(s, product, changes, _current_user())
    return ok(dump(ProductOut, product))


@bp.delete("/<int:product_id>")
@require_role("ADMIN")
def products_delete(product_id: int):
    s = db_session()
    product = get_or_404(s, Product, product_id, "Product")
    delete_product(s, product, _current_user())
    return ok(message="Product deleted")


@bp.post("/<int:product_id>/media")
@require_role("ADMIN", "EDITOR")
def products_add_media(product_id: int):
    s = db_session()
    product = get_or_404(s, Product, product_id, "Product")
    payload = parse_body(ProductMediaIn)
    product = add_product_media(s, product, payload.media_id, _current_user())
    return ok(dump(ProductOut, product))
