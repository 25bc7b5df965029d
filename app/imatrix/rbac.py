from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import current_app, g

from app.imatrix.api import ApiError
from app.imatrix.models import User


def user_has_role(user: User | None, *roles: str) -> bool:
    if not user or not user.is_active:
        return False
    return not roles or user.role in roles


def require_role(*roles: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Bearer-token guard. With no roles any authenticated user passes.
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(fn)
        def wrapped(*args: Any, **kwargs: Any):
            user: User | None = getattr(g, "current_user", None)
            # Unauthenticated -> 401 with the reason recorded by load_current_user.
            if not user or not user.is_active:
                raise ApiError(401, getattr(g, "auth_error", None) or "No token provided")
            # Authenticated but unauthorized -> 403
            if not user_has_role(user, *roles):
                current_app.logger.warning(
                    "Forbidden: user=%s role=%s required=%s request_id=%s",
                    user.email,
                    user.role,
                    ",".join(roles),
                    getattr(g, "request_id", None),
                )
                raise ApiError(403, "Insufficient permissions")
            return fn(*args, **kwargs)

        return wrapped

    return decorator


login_required = require_role()
