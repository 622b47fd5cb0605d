# app/routes/users.py

"""
User Routes.

Account administration and self-service profile endpoints.

Summary
-------
Endpoints include:
  - List accounts (``manage_users``)
  - Read and edit the caller's own profile
  - List the caller's saved posts and purchases
  - Replace the caller's profile picture (``upload_profile_pic``)
  - Change another account's role (admin with ``manage_users``)
  - Suspend or re-activate an account (``manage_users``)
  - Delete an account and everything it owns (``manage_users``)
  - Role probes: ``/users/admin``, ``/users/manager``, ``/users/user``

Authorization
-------------
Every guard depends on the authenticated caller, so a request is
authenticated, then authorized, then handled. Guards never write.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile
from fastapi.responses import ORJSONResponse

from app.dependencies import (
    CurrentUserDep,
    MediaDep,
    PageQueryDep,
    PostServiceDep,
    UserQueryListDep,
    UserServiceDep,
)
from app.models import UserDB
from app.rabc import Permission, Role
from app.rabc.guards import require_permission, require_role
from app.schemas import (
    PostListResponse,
    PostResponse,
    PurchasedPost,
    PurchaseListResponse,
    SuccessResponse,
    UserEnvelope,
    UserListResponse,
    UserResponse,
    UserRoleUpdate,
    UserStatusUpdate,
    UserUpdate,
)

router = APIRouter(prefix="/users", tags=["👤 Users"])

UserManagerDep = Annotated[UserDB, Depends(require_permission(Permission.MANAGE_USERS))]
ProfilePictureDep = Annotated[UserDB, Depends(require_permission(Permission.UPLOAD_PROFILE_PIC))]


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=UserListResponse,
    summary="List accounts",
    description="Paginated list of accounts. Requires the `manage_users` permission.",
    responses={
        403: {
            "description": "Forbidden",
            "content": {
                "application/json": {
                    "example": {"success": False, "msg": "Access denied. Required permission: manage_users"},
                },
            },
        },
    },
    operation_id="users_list",
)
async def list_users(
    _: UserManagerDep,
    query: UserQueryListDep,
    service: UserServiceDep,
) -> UserListResponse:
    """
    List accounts.

    Parameters
    ----------
    _ : UserDB
        Caller holding ``manage_users``.
    query : UserListQuery
        Pagination parameters.
    service : UserService
        User service dependency.

    Returns
    -------
    UserListResponse
        One page of accounts with the total count.
    """
    users, total = await service.list_users(skip=query.skip, limit=query.limit)
    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        count=len(users),
        total=total,
        skip=query.skip,
        limit=query.limit,
    )


@router.get(
    "/me",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Get own profile",
    operation_id="users_get_me",
)
async def get_me(current_user: CurrentUserDep) -> UserEnvelope:
    return UserEnvelope(user=UserResponse.model_validate(current_user))


@router.put(
    "/me",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Update own profile",
    description="Edit name, email, bio or password. The password is re-hashed only when supplied.",
    operation_id="users_update_me",
)
async def update_me(
    payload: UserUpdate,
    current_user: CurrentUserDep,
    service: UserServiceDep,
) -> UserEnvelope:
    """
    Update the caller's profile.

    Raises
    ------
    DuplicateIdentityError
        If the new email belongs to another account.
    """
    user = await service.update_profile(current_user, payload)
    return UserEnvelope(msg="Profile updated successfully", user=UserResponse.model_validate(user))


@router.put(
    "/me/profile-picture",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Replace profile picture",
    description="Upload a JPEG, PNG, GIF or WebP image. Requires `upload_profile_pic`.",
    responses={
        413: {"description": "Image too large"},
        415: {"description": "Unsupported image type"},
    },
    operation_id="users_profile_picture",
)
async def update_profile_picture(
    current_user: ProfilePictureDep,
    service: UserServiceDep,
    media: MediaDep,
    background_tasks: BackgroundTasks,
    file: Annotated[UploadFile, File(description="Profile picture")],
) -> UserEnvelope:
    user, previous = await service.update_profile_picture(current_user, file)
    if previous and previous != user.profile_picture_public_id:
        background_tasks.add_task(media.delete, previous)
    return UserEnvelope(msg="Profile picture updated", user=UserResponse.model_validate(user))


@router.get(
    "/me/saved",
    response_class=ORJSONResponse,
    response_model=PostListResponse,
    summary="List saved posts",
    description="Posts the caller saved, most recently saved first.",
    operation_id="users_saved_posts",
)
async def list_saved_posts(
    current_user: CurrentUserDep,
    query: PageQueryDep,
    service: PostServiceDep,
) -> PostListResponse:
    posts, total = await service.saved_posts(current_user, page=query.page, limit=query.limit)
    return PostListResponse(
        posts=[PostResponse.model_validate(post) for post in posts],
        page=query.page,
        limit=query.limit,
        total=total,
    )


@router.get(
    "/me/purchases",
    response_class=ORJSONResponse,
    response_model=PurchaseListResponse,
    summary="List purchases",
    description="Posts the caller bought with the price paid, newest purchase first.",
    operation_id="users_purchases",
)
async def list_purchases(
    current_user: CurrentUserDep,
    query: PageQueryDep,
    service: PostServiceDep,
) -> PurchaseListResponse:
    """
    List the caller's purchases.

    Parameters
    ----------
    current_user : UserDB
        Authenticated caller.
    query : PageQuery
        Page number and size.
    service : PostService
        Post service dependency.

    Returns
    -------
    PurchaseListResponse
        One page of purchased posts with the total count.
    """
    rows, total = await service.purchases(current_user, page=query.page, limit=query.limit)
    return PurchaseListResponse(
        purchases=[
            PurchasedPost(
                post=PostResponse.model_validate(post),
                price_paid=purchase.price_paid,
                purchased_at=purchase.purchased_at,
            )
            for purchase, post in rows
        ],
        page=query.page,
        limit=query.limit,
        total=total,
    )


@router.put(
    "/{user_id}/role",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Change an account's role",
    description="Admins only. An admin cannot remove their own admin role.",
    responses={
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {"success": False, "msg": "Invalid role. Must be: user, manager, or admin"},
                },
            },
        },
        403: {
            "description": "Forbidden",
            "content": {
                "application/json": {
                    "example": {"success": False, "msg": "Cannot remove your own admin privileges"},
                },
            },
        },
        404: {
            "description": "Not Found",
            "content": {"application/json": {"example": {"success": False, "msg": "User not found"}}},
        },
    },
    operation_id="users_change_role",
    dependencies=[Depends(require_role(Role.ADMIN))],
)
async def change_role(
    user_id: UUID,
    payload: UserRoleUpdate,
    acting: UserManagerDep,
    service: UserServiceDep,
) -> UserEnvelope:
    """
    Change the role of an account.

    Parameters
    ----------
    user_id : UUID
        Target account id.
    payload : UserRoleUpdate
        The new role.
    acting : UserDB
        Admin performing the change.
    service : UserService
        User service dependency.

    Returns
    -------
    UserEnvelope
        The updated account.
    """
    user = await service.change_role(acting, user_id, payload.role)
    return UserEnvelope(msg="User role updated", user=UserResponse.model_validate(user))


@router.put(
    "/{user_id}/status",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Suspend or re-activate an account",
    operation_id="users_set_status",
)
async def set_status(
    user_id: UUID,
    payload: UserStatusUpdate,
    acting: UserManagerDep,
    service: UserServiceDep,
) -> UserEnvelope:
    user = await service.set_status(acting, user_id, suspended=payload.suspended)
    msg = "User suspended" if user.suspended else "User activated"
    return UserEnvelope(msg=msg, user=UserResponse.model_validate(user))


@router.delete(
    "/{user_id}",
    response_class=ORJSONResponse,
    response_model=SuccessResponse,
    summary="Delete an account",
    description="Deletes the account and all of its posts. Nobody can delete their own account.",
    responses={
        403: {
            "description": "Forbidden",
            "content": {
                "application/json": {
                    "example": {"success": False, "msg": "You cannot delete your own account"},
                },
            },
        },
    },
    operation_id="users_delete",
)
async def delete_user(
    user_id: UUID,
    acting: UserManagerDep,
    service: UserServiceDep,
    media: MediaDep,
    background_tasks: BackgroundTasks,
) -> SuccessResponse:
    """
    Delete an account.

    Stored images of the account and its posts are removed after the
    response, once the deletion is committed.
    """
    public_ids = await service.delete_user(acting, user_id)
    if public_ids:
        background_tasks.add_task(media.delete_many, public_ids)
    return SuccessResponse(msg="User deleted successfully")


@router.post(
    "/admin",
    response_class=ORJSONResponse,
    response_model=SuccessResponse,
    summary="Admin role probe",
    operation_id="users_probe_admin",
    dependencies=[Depends(require_role(Role.ADMIN))],
)
async def admin_probe() -> SuccessResponse:
    return SuccessResponse(msg="Admin access granted")


@router.post(
    "/manager",
    response_class=ORJSONResponse,
    response_model=SuccessResponse,
    summary="Manager role probe",
    operation_id="users_probe_manager",
    dependencies=[Depends(require_role(Role.MANAGER, Role.ADMIN))],
)
async def manager_probe() -> SuccessResponse:
    return SuccessResponse(msg="Manager access granted")


@router.post(
    "/user",
    response_class=ORJSONResponse,
    response_model=SuccessResponse,
    summary="User role probe",
    operation_id="users_probe_user",
    dependencies=[Depends(require_role(Role.USER, Role.MANAGER, Role.ADMIN))],
)
async def user_probe() -> SuccessResponse:
    return SuccessResponse(msg="User access granted")
