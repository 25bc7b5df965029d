from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.imatrix.api import get_or_404
from app.imatrix.audit import audit_log
from app.imatrix.modules.media.models import Media
from app.imatrix.modules.products.models import Product
from app.imatrix.slugs import unique_slug

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.imatrix.models import User
    from app.imatrix.modules.products.schemas import ProductIn


def create_product(s: "Session", payload: "ProductIn", user: "User") -> Product:
    product = Product(
        name=payload.name,
        slug=unique_slug(s, Product, payload.name),
        summary=payload.summary,
        description=payload.description,
        specs=payload.specs,
        price=payload.price,
        featured=payload.featured,
    )
    s.add(product)
    s.commit()

    audit_log(user.email, "CREATE", "Product", product.id, {"name": product.name})
    return product


def update_product(s: "Session", product: Product, changes: dict[str, Any], user: "User") -> Product:
    if "name" in changes:
        product.slug = unique_slug(s, Product, changes["name"], exclude_id=product.id)
    for field, value in changes.items():
        setattr(product, field, value)
    s.commit()

    audit_log(user.email, "UPDATE", "Product", product.id, {"name": product.name})
    return product


def delete_product(s: "Session", product: Product, user: "User") -> None:
    product_id, name = product.id, product.name
    s.delete(product)
    s.commit()

    audit_log(user.email, "DELETE", "Product", product_id, {"name": name})


def add_product_media(s: "Session", product: Product, media_id: int, user: "User") -> Product:
    media = get_or_404(s, Media, media_id, "Media")
    if media not in product.media:
        product.media.append(media)
    s.commit()

    audit_log(user.email, "UPDATE", "Product", product.id, {"action": "Added media", "mediaId": media.id})
    return product
