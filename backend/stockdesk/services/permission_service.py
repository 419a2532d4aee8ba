# Overview: Role-based permission checks against the declarative role table.

"""
Permission Checking

DESIGN PRINCIPLES:
- Fail closed: unknown roles and unknown permission codes are denied
- Log denials only: permission grants are not logged
- One table: stockdesk.permissions.DEFAULT_ROLE_PERMISSIONS
"""

from __future__ import annotations

from flask import current_app, has_app_context

from ..models import User
from ..permissions import get_role_permissions


class PermissionDeniedError(Exception):
    """Raised when user lacks required permission."""
    pass


def get_user_permissions(user: User) -> set[str]:
    """
    Get all permission codes for a user.

    Returns set of permission codes (e.g., {"CREATE_SALE", "VIEW_SALES"}).
    """
    return get_role_permissions(user.role)


def user_has_permission(user: User, permission_code: str) -> bool:
    return permission_code in get_user_permissions(user)


def require_permission(user: User, permission_code: str, resource: str | None = None) -> None:
    """
    Require user to have permission, raise PermissionDeniedError if not.

    Usage:
        require_permission(g.current_user, "REVERSE_SALE", resource="/api/sales/3")
    """
    if user_has_permission(user, permission_code):
        return

    if has_app_context():
        current_app.logger.warning(
            "Permission denied: user_id=%s role=%s permission=%s resource=%s",
            user.id,
            user.role,
            permission_code,
            resource,
        )
    raise PermissionDeniedError(f"Permission denied: {permission_code}")
