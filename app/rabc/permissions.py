"""
Role-based access control (RBAC) permissions.

Roles are NOT hierarchical: each role enumerates its own permission set and
``admin`` does not implicitly inherit ``manager`` or ``user`` capabilities.
Only managers hold ``approve_post`` and only users hold ``purchase_posts``,
so an admin can neither approve nor buy a post.
"""

from collections.abc import Iterable, Mapping
from enum import StrEnum
from types import MappingProxyType

from app.errors.authorization import ForbiddenError, MisconfiguredRoleError
from app.models import UserDB


class Role(StrEnum):
    """Account roles, the sole basis for coarse access control."""

    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"


VALID_ROLES: frozenset[str] = frozenset(Role)


class Permission(StrEnum):
    """Named capabilities checked against a role's granted set."""

    READ_POSTS = "read_posts"
    CREATE_POSTS = "create_posts"
    EDIT_POSTS = "edit_posts"
    DELETE_POSTS = "delete_posts"
    PURCHASE_POSTS = "purchase_posts"
    SAVE_POSTS = "save_posts"
    APPROVE_POST = "approve_post"
    MODERATE_COMMENTS = "moderate_comments"
    UPLOAD_PROFILE_PIC = "upload_profile_pic"
    VIEW_PROFILE = "view_profile"
    MANAGE_CONTENT = "manage_content"
    MANAGE_USERS = "manage_users"
    SYSTEM_SETTINGS = "system_settings"


class RolePermissionTable:
    """
    Immutable mapping from role to the permissions it grants.

    Built once at application start and handed to the authorization checks.
    Lookups for an unknown role return an empty set so that authorization
    always degrades to a denial.

    Args:
        grants: Role name to iterable of permissions

    Raises:
        ValueError: If any role maps to an empty permission set
    """

    def __init__(self, grants: Mapping[str, Iterable[str]]) -> None:
        table: dict[str, frozenset[str]] = {}
        for role, permissions in grants.items():
            granted = frozenset(str(p) for p in permissions)
            if not granted:
                raise ValueError(f"Role {role!r} must grant at least one permission")
            table[str(role)] = granted
        self._table = MappingProxyType(table)

    @property
    def roles(self) -> frozenset[str]:
        return frozenset(self._table)

    def has_role_entry(self, role: str) -> bool:
        return role in self._table

    def permissions_for(self, role: str) -> frozenset[str]:
        return self._table.get(role, frozenset())

    def grants(self, role: str, permission: str) -> bool:
        return permission in self.permissions_for(role)

    def __repr__(self) -> str:
        return f"RolePermissionTable(roles={sorted(self._table)})"


DEFAULT_PERMISSION_TABLE = RolePermissionTable(
    {
        Role.USER: [
            Permission.READ_POSTS,
            Permission.PURCHASE_POSTS,
            Permission.UPLOAD_PROFILE_PIC,
            Permission.CREATE_POSTS,
            Permission.SAVE_POSTS,
            Permission.VIEW_PROFILE,
        ],
        Role.MANAGER: [
            Permission.READ_POSTS,
            Permission.CREATE_POSTS,
            Permission.EDIT_POSTS,
            Permission.MODERATE_COMMENTS,
            Permission.APPROVE_POST,
            Permission.UPLOAD_PROFILE_PIC,
            Permission.SAVE_POSTS,
            Permission.VIEW_PROFILE,
            Permission.MANAGE_CONTENT,
        ],
        Role.ADMIN: [
            Permission.READ_POSTS,
            Permission.CREATE_POSTS,
            Permission.EDIT_POSTS,
            Permission.DELETE_POSTS,
            Permission.MANAGE_USERS,
            Permission.UPLOAD_PROFILE_PIC,
            Permission.SAVE_POSTS,
            Permission.VIEW_PROFILE,
            Permission.MANAGE_CONTENT,
            Permission.SYSTEM_SETTINGS,
        ],
    },
)


def check_role(caller: UserDB, allowed_roles: Iterable[str]) -> UserDB:
    """
    Ensure the caller's role is one of ``allowed_roles``.

    Args:
        caller: Authenticated account
        allowed_roles: Roles admitted by the endpoint

    Returns:
        UserDB: The caller, unchanged

    Raises:
        ForbiddenError: If the caller's role is not allowed
    """
    allowed = [str(role) for role in allowed_roles]
    if caller.role not in allowed:
        raise ForbiddenError(f"Access denied. Required role: {', '.join(allowed)}")
    return caller


def check_permission(
    table: RolePermissionTable,
    caller: UserDB,
    permission: str,
) -> UserDB:
    """
    Ensure the caller's role grants ``permission``.

    Args:
        table: Role to permission table in effect
        caller: Authenticated account
        permission: Required capability

    Returns:
        UserDB: The caller, unchanged

    Raises:
        MisconfiguredRoleError: If the caller's role has no table entry
        ForbiddenError: If the role lacks the permission
    """
    if not table.has_role_entry(caller.role):
        raise MisconfiguredRoleError(caller.role)
    if not table.grants(caller.role, permission):
        raise ForbiddenError(f"Access denied. Required permission: {permission}")
    return caller
