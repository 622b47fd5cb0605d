"""Account management: profiles, role changes, suspension and deletion."""

from uuid import UUID

from fastapi import UploadFile

from app.errors import (
    DuplicateIdentityError,
    ForbiddenError,
    InvalidRoleError,
    NotFoundError,
    SelfDemotionForbiddenError,
)
from app.managers.password_manager import hash_password
from app.models import UserDB
from app.monitoring import get_logger
from app.rabc import VALID_ROLES, Role, assert_not_self
from app.repositories import PostRepository, UserRepository
from app.schemas.user import UserUpdate
from app.services.media import MediaService

logger = get_logger(__name__)


class UserService:
    """Service for account administration and self-service profile edits."""

    def __init__(
        self,
        user_repo: UserRepository,
        post_repo: PostRepository,
        media: MediaService | None = None,
    ) -> None:
        self.user_repo = user_repo
        self.post_repo = post_repo
        self._media = media

    @property
    def media(self) -> MediaService:
        if self._media is None:
            self._media = MediaService()
        return self._media

    async def get_user(self, user_id: UUID) -> UserDB:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User")
        return user

    async def list_users(self, skip: int = 0, limit: int = 10) -> tuple[list[UserDB], int]:
        users = await self.user_repo.get_all(skip=skip, limit=limit)
        return users, await self.user_repo.count()

    async def update_profile(self, caller: UserDB, data: UserUpdate) -> UserDB:
        """
        Apply self-service profile changes.

        The password is re-hashed only when a new one is supplied.

        Raises:
            DuplicateIdentityError: If the new email belongs to another account
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True, exclude={"password"})

        if "email" in changes and changes["email"] != caller.email:
            if await self.user_repo.email_exists(changes["email"], exclude_id=caller.id):
                raise DuplicateIdentityError

        if data.password is not None:
            changes["password_hash"] = await hash_password(data.password.get_secret_value())

        if not changes:
            return caller
        return await self.user_repo.update(caller, changes)

    async def update_profile_picture(self, caller: UserDB, file: UploadFile) -> tuple[UserDB, str | None]:
        """
        Store a new profile picture for the caller.

        Returns:
            tuple[UserDB, str | None]: Updated account and the public id of
            the replaced picture, to be removed once the change is committed
        """
        stored = await self.media.upload_profile_picture(str(caller.id), file)
        previous = caller.profile_picture_public_id
        user = await self.user_repo.update(
            caller,
            {"profile_picture_url": stored.url, "profile_picture_public_id": stored.public_id},
        )
        return user, previous

    async def change_role(self, acting: UserDB, target_id: UUID, new_role: str) -> UserDB:
        """
        Change the role of ``target_id``.

        Checks run in order: role value, self-demotion, target existence.
        An admin may only "change" their own role to admin, which is a no-op.
        The read-check-write sequence is not atomic: two concurrent requests
        for the same admin can both pass the guard.

        Raises:
            InvalidRoleError: If ``new_role`` is not a known role
            SelfDemotionForbiddenError: If an admin tries to drop their own admin role
            NotFoundError: If the target account does not exist
        """
        if new_role not in VALID_ROLES:
            raise InvalidRoleError

        if acting.role == Role.ADMIN and target_id == acting.id and new_role != Role.ADMIN:
            raise SelfDemotionForbiddenError

        target = await self.get_user(target_id)
        if target.role == new_role:
            return target

        previous = target.role
        user = await self.user_repo.update(target, {"role": str(new_role)})
        logger.info(
            "Role changed",
            target_id=str(target_id),
            by=str(acting.id),
            previous=previous,
            role=user.role,
        )
        return user

    async def set_status(self, acting: UserDB, target_id: UUID, *, suspended: bool) -> UserDB:
        """
        Suspend or re-activate an account.

        Raises:
            ForbiddenError: If the caller tries to suspend their own account
            NotFoundError: If the target account does not exist
        """
        if suspended and acting.id == target_id:
            raise ForbiddenError("You cannot suspend your own account")

        target = await self.get_user(target_id)
        user = await self.user_repo.update(target, {"suspended": suspended})
        logger.info("Account status changed", target_id=str(target_id), by=str(acting.id), suspended=suspended)
        return user

    async def delete_user(self, acting: UserDB, target_id: UUID) -> list[str]:
        """
        Delete an account together with every post it owns.

        Self-deletion is refused whatever the caller's role.

        Returns:
            list[str]: Storage ids of the images to remove after commit

        Raises:
            ForbiddenError: If ``target_id`` is the caller
            NotFoundError: If the target account does not exist
        """
        assert_not_self(acting, target_id)
        target = await self.get_user(target_id)

        public_ids = await self.post_repo.delete_many_by_owner(target.id)
        if target.profile_picture_public_id:
            public_ids.append(target.profile_picture_public_id)

        await self.user_repo.delete(target.id)
        logger.info("Account deleted", target_id=str(target_id), by=str(acting.id))
        return public_ids
