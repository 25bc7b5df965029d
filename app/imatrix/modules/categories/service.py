from __future__ import annotations

from typing import TYPE_CHECKING

from app.imatrix.audit import audit_log
from app.imatrix.modules.categories.models import Category
from app.imatrix.slugs import unique_slug

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.imatrix.models import User


def create_category(s: "Session", name: str, user: "User") -> Category:
    category = Category(name=name, slug=unique_slug(s, Category, name))
    s.add(category)
    s.commit()

    audit_log(user.email, "CREATE", "Category", category.id, {"name": category.name})
    return category


def update_category(s: "Session", category: Category, name: str, user: "User") -> Category:
    old_name = category.name
    category.name = name
    category.slug = unique_slug(s, Category, name, exclude_id=category.id)
    s.commit()

    audit_log(user.email, "UPDATE", "Category", category.id, {"name": name, "previousName": old_name})
    return category


def delete_category(s: "Session", category: Category, user: "User") -> None:
    """Detaches the category from its posts; the posts themselves stay."""
    category_id, name = category.id, category.name
    s.delete(category)
    s.commit()

    audit_log(user.email, "DELETE", "Category", category_id, {"name": name})
