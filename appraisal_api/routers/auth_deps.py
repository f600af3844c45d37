"""
Acting-user dependencies.
The caller identifies itself with the headers named by `user_id_header`
and `user_role_header` (X-User-Id and X-User-Role by default);
there is no credential check. Role guards build on top of that.
"""
import logging
from typing import Callable, List, Optional

from fastapi import Depends, Header

from appraisal_api.core.config import settings
from appraisal_api.core.exceptions import AccessDeniedError, AuthenticationError
from appraisal_api.models.user import UserRole
from appraisal_api.schemas.user import Actor

logger = logging.getLogger(__name__)


def get_actor(
    x_user_id: Optional[str] = Header(None, alias=settings.user_id_header),
    x_user_role: Optional[str] = Header(None, alias=settings.user_role_header),
) -> Actor:
    """
    Resolves the acting user from request headers.
    """
    if not x_user_id or not x_user_role:
        logger.warning("Request rejected: missing acting user headers")
        raise AuthenticationError()

    try:
        role = UserRole(x_user_role.strip().lower())
    except ValueError:
        logger.warning(f"Request rejected: unknown role '{x_user_role}'")
        raise AuthenticationError(f"Unknown role '{x_user_role}'")

    return Actor(id=x_user_id, role=role)


def require_role(allowed_roles: List[UserRole]) -> Callable:
    """
    Dependency factory that checks if the actor has one of the allowed roles.

    Usage:
        @router.post("/bulk/release-to-manager")
        def release(actor: Actor = Depends(require_role([UserRole.ADMIN]))):
            ...
    """
    def role_checker(actor: Actor = Depends(get_actor)) -> Actor:
        if actor.role not in allowed_roles:
            raise AccessDeniedError(
                f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return actor
    return role_checker


def require_admin():
    """Shorthand for requiring the admin role."""
    return require_role([UserRole.ADMIN])
