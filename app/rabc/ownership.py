"""Per-resource ownership checks."""

from uuid import UUID

from app.errors.authorization import ForbiddenError
from app.models import UserDB
from app.rabc.permissions import Role


def is_owner_or_admin(caller: UserDB, owner_id: UUID) -> bool:
    return caller.id == owner_id or caller.role == Role.ADMIN


def assert_can_mutate(caller: UserDB, owner_id: UUID) -> None:
    """
    Allow a mutation only by the resource's owner or an admin.

    Raises:
        ForbiddenError: If the caller neither owns the resource nor is an admin
    """
    if not is_owner_or_admin(caller, owner_id):
        raise ForbiddenError("Not authorized to modify this resource")


def assert_not_self(caller: UserDB, target_id: UUID) -> None:
    """
    Block an account from deleting itself, whatever its role.

    Raises:
        ForbiddenError: If ``target_id`` is the caller's own id
    """
    if caller.id == target_id:
        raise ForbiddenError("You cannot delete your own account")
