"""
FastAPI dependency factories enforcing roles and permissions.

Each guard depends on ``get_current_user``, so FastAPI always authenticates
before it authorizes, and the handler only runs once both passed. Guards
never write anything.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends

from app.dependencies import get_current_user, get_permission_table
from app.models import UserDB
from app.rabc.permissions import Permission, RolePermissionTable, check_permission, check_role

Guard = Callable[..., Awaitable[UserDB]]


def require_role(*roles: str) -> Guard:
    """
    Build a dependency admitting only callers whose role is in ``roles``.

    Examples
    --------
    >>> @router.post("/admin", dependencies=[Depends(require_role(Role.ADMIN))])
    """
    allowed = tuple(str(role) for role in roles)

    async def role_guard(caller: Annotated[UserDB, Depends(get_current_user)]) -> UserDB:
        return check_role(caller, allowed)

    return role_guard


def require_permission(permission: Permission | str) -> Guard:
    """Build a dependency admitting only callers whose role grants ``permission``."""

    async def permission_guard(
        caller: Annotated[UserDB, Depends(get_current_user)],
        table: Annotated[RolePermissionTable, Depends(get_permission_table)],
    ) -> UserDB:
        return check_permission(table, caller, str(permission))

    return permission_guard
