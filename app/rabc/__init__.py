"""Role-based access control: permission table, checks and ownership rules."""

from app.rabc.ownership import assert_can_mutate, assert_not_self, is_owner_or_admin
from app.rabc.permissions import (
    DEFAULT_PERMISSION_TABLE,
    VALID_ROLES,
    Permission,
    Role,
    RolePermissionTable,
    check_permission,
    check_role,
)

__all__ = [
    "DEFAULT_PERMISSION_TABLE",
    "VALID_ROLES",
    "Permission",
    "Role",
    "RolePermissionTable",
    "assert_can_mutate",
    "assert_not_self",
    "check_permission",
    "check_role",
    "is_owner_or_admin",
]
