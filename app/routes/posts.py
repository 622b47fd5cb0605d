# app/routes/posts.py

"""
Post Routes.

Marketplace endpoints: publishing, browsing, moderation, purchases and
engagement (likes, comments, saves, star ratings).

Reads are public. Mutations require an authenticated caller; edits and
deletions additionally require owning the post or being an admin.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from app.configs.settings import MAX_TITLE_LENGTH, MIN_TITLE_LENGTH
from app.dependencies import CurrentUserDep, MediaDep, PageQueryDep, PostQueryListDep, PostServiceDep
from app.models import UserDB
from app.rabc import Permission
from app.rabc.guards import require_permission
from app.schemas import (
    CommentCreate,
    CommentEnvelope,
    CommentListResponse,
    CommentResponse,
    DownloadResponse,
    LikeResponse,
    PostEnvelope,
    PostListResponse,
    PostResponse,
    PostUpdate,
    PurchaseResponse,
    RatingCreate,
    RatingResponse,
    SaveResponse,
    SuccessResponse,
)
from app.utils.helpers import parse_tags

router = APIRouter(prefix="/posts", tags=["🖼️ Posts"])

NOT_FOUND_RESPONSE = {
    404: {
        "description": "Not Found",
        "content": {"application/json": {"example": {"success": False, "msg": "Post not found"}}},
    },
}


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=PostListResponse,
    summary="Browse posts",
    description="Newest first. Filter by `category` and by comma-separated `tags` (any match).",
    operation_id="posts_list",
)
async def list_posts(query: PostQueryListDep, service: PostServiceDep) -> PostListResponse:
    posts, total = await service.list_posts(
        page=query.page,
        limit=query.limit,
        category=query.category,
        tags=query.tags,
    )
    return PostListResponse(
        posts=[PostResponse.model_validate(post) for post in posts],
        page=query.page,
        limit=query.limit,
        total=total,
    )


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=PostEnvelope,
    status_code=HTTP_201_CREATED,
    summary="Publish a post",
    description="Multipart form with the post fields and an optional image. Requires `create_posts`.",
    responses={
        413: {"description": "Image too large"},
        415: {"description": "Unsupported image type"},
    },
    operation_id="posts_create",
)
async def create_post(
    author: Annotated[UserDB, Depends(require_permission(Permission.CREATE_POSTS))],
    service: PostServiceDep,
    title: Annotated[str, Form(min_length=MIN_TITLE_LENGTH, max_length=MAX_TITLE_LENGTH)],
    price: Annotated[float, Form(ge=0, allow_inf_nan=False)] = 0.0,
    category: Annotated[str | None, Form(max_length=50)] = None,
    tags: Annotated[str | None, Form(description="Comma-separated tags")] = None,
    file: Annotated[UploadFile | None, File(description="Post image")] = None,
) -> PostEnvelope:
    """
    Publish a post.

    Parameters
    ----------
    author : UserDB
        Caller holding ``create_posts``.
    service : PostService
        Post service dependency.
    title : str
        Post title.
    price : float
        Price, ``0`` for a free post.
    category : str | None
        Optional category.
    tags : str | None
        Comma-separated tags.
    file : UploadFile | None
        Optional image.

    Returns
    -------
    PostEnvelope
        The created post.
    """
    post = await service.create_post(
        author,
        title=title,
        price=price,
        category=category.strip() if category else None,
        tags=parse_tags(tags),
        file=file,
    )
    return PostEnvelope(msg="Post created successfully", post=PostResponse.model_validate(post))


@router.get(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostEnvelope,
    summary="Get a post",
    responses=NOT_FOUND_RESPONSE,
    operation_id="posts_get",
)
async def get_post(post_id: UUID, service: PostServiceDep) -> PostEnvelope:
    post = await service.get_post(post_id)
    return PostEnvelope(post=PostResponse.model_validate(post))


@router.put(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostEnvelope,
    summary="Edit a post",
    description="Owner or admin only.",
    responses=NOT_FOUND_RESPONSE,
    operation_id="posts_update",
)
async def update_post(
    post_id: UUID,
    payload: PostUpdate,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> PostEnvelope:
    post = await service.update_post(current_user, post_id, payload)
    return PostEnvelope(msg="Post updated successfully", post=PostResponse.model_validate(post))


@router.put(
    "/{post_id}/approve",
    response_class=ORJSONResponse,
    response_model=PostEnvelope,
    summary="Approve a post",
    description="Requires `approve_post`, which only managers hold.",
    responses=NOT_FOUND_RESPONSE,
    operation_id="posts_approve",
    dependencies=[Depends(require_permission(Permission.APPROVE_POST))],
)
async def approve_post(post_id: UUID, service: PostServiceDep) -> PostEnvelope:
    post = await service.approve_post(post_id)
    return PostEnvelope(msg="Post approved", post=PostResponse.model_validate(post))


@router.delete(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=SuccessResponse,
    summary="Delete a post",
    description="Owner or admin only. The stored image is removed after the response.",
    responses={
        **NOT_FOUND_RESPONSE,
        403: {
            "description": "Forbidden",
            "content": {
                "application/json": {
                    "example": {"success": False, "msg": "Not authorized to modify this resource"},
                },
            },
        },
    },
    operation_id="posts_delete",
)
async def delete_post(
    post_id: UUID,
    current_user: CurrentUserDep,
    service: PostServiceDep,
    media: MediaDep,
    background_tasks: BackgroundTasks,
) -> SuccessResponse:
    public_id = await service.delete_post(current_user, post_id)
    if public_id:
        background_tasks.add_task(media.delete, public_id)
    return SuccessResponse(msg="Post deleted successfully")


@router.post(
    "/{post_id}/purchase",
    response_class=ORJSONResponse,
    response_model=PurchaseResponse,
    summary="Buy a post",
    description="Requires `purchase_posts`. Free posts and repeat purchases are rejected.",
    responses={
        **NOT_FOUND_RESPONSE,
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {"example": {"success": False, "msg": "This post is free to download"}},
            },
        },
    },
    operation_id="posts_purchase",
)
async def purchase_post(
    post_id: UUID,
    buyer: Annotated[UserDB, Depends(require_permission(Permission.PURCHASE_POSTS))],
    service: PostServiceDep,
) -> PurchaseResponse:
    post, purchase = await service.purchase(buyer, post_id)
    return PurchaseResponse(
        msg="Purchase successful",
        post=PostResponse.model_validate(post),
        price_paid=purchase.price_paid,
    )


@router.get(
    "/{post_id}/download",
    response_class=ORJSONResponse,
    response_model=DownloadResponse,
    summary="Download a post's image",
    description="Paid posts require a purchase unless the caller owns the post or is an admin.",
    responses={
        **NOT_FOUND_RESPONSE,
        403: {
            "description": "Forbidden",
            "content": {
                "application/json": {
                    "example": {"success": False, "msg": "You must purchase this post first"},
                },
            },
        },
    },
    operation_id="posts_download",
)
async def download_post(
    post_id: UUID,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> DownloadResponse:
    url = await service.download_url(current_user, post_id)
    return DownloadResponse(url=url)


@router.post(
    "/{post_id}/like",
    response_class=ORJSONResponse,
    response_model=LikeResponse,
    summary="Like a post",
    responses=NOT_FOUND_RESPONSE,
    operation_id="posts_like",
)
async def like_post(post_id: UUID, _: CurrentUserDep, service: PostServiceDep) -> LikeResponse:
    likes = await service.like(post_id)
    return LikeResponse(likes=likes)


@router.post(
    "/{post_id}/comment",
    response_class=ORJSONResponse,
    response_model=CommentEnvelope,
    status_code=HTTP_201_CREATED,
    summary="Comment on a post",
    responses=NOT_FOUND_RESPONSE,
    operation_id="posts_comment",
)
async def comment_post(
    post_id: UUID,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> CommentEnvelope:
    comment = await service.comment(current_user, post_id, payload.text.strip())
    return CommentEnvelope(msg="Comment added", comment=CommentResponse.model_validate(comment))


@router.get(
    "/{post_id}/comments",
    response_class=ORJSONResponse,
    response_model=CommentListResponse,
    summary="List a post's comments",
    description="Oldest first.",
    responses=NOT_FOUND_RESPONSE,
    operation_id="posts_comments",
)
async def list_comments(post_id: UUID, query: PageQueryDep, service: PostServiceDep) -> CommentListResponse:
    comments, total = await service.list_comments(post_id, page=query.page, limit=query.limit)
    return CommentListResponse(
        comments=[CommentResponse.model_validate(comment) for comment in comments],
        page=query.page,
        limit=query.limit,
        total=total,
    )


@router.post(
    "/{post_id}/save",
    response_class=ORJSONResponse,
    response_model=SaveResponse,
    summary="Save or unsave a post",
    description="Toggles the saved state. Requires `save_posts`.",
    responses=NOT_FOUND_RESPONSE,
    operation_id="posts_save",
)
async def save_post(
    post_id: UUID,
    caller: Annotated[UserDB, Depends(require_permission(Permission.SAVE_POSTS))],
    service: PostServiceDep,
) -> SaveResponse:
    saved = await service.toggle_save(caller, post_id)
    return SaveResponse(msg="Post saved" if saved else "Post removed from saved", saved=saved)


@router.post(
    "/{post_id}/rate",
    response_class=ORJSONResponse,
    response_model=RatingResponse,
    summary="Rate a post",
    description="One to five stars. Rating again replaces the caller's earlier value.",
    responses=NOT_FOUND_RESPONSE,
    operation_id="posts_rate",
)
async def rate_post(
    post_id: UUID,
    payload: RatingCreate,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> RatingResponse:
    """
    Rate a post.

    Parameters
    ----------
    post_id : UUID
        Rated post.
    payload : RatingCreate
        Star value.
    current_user : UserDB
        Authenticated caller.
    service : PostService
        Post service dependency.

    Returns
    -------
    RatingResponse
        The post's new average and rating count, with the caller's value.
    """
    average, count = await service.rate(current_user, post_id, payload.value)
    return RatingResponse(msg="Rating saved", average=average, count=count, your_rating=payload.value)


@router.get(
    "/{post_id}/rating",
    response_class=ORJSONResponse,
    response_model=RatingResponse,
    summary="Get a post's rating",
    responses=NOT_FOUND_RESPONSE,
    operation_id="posts_rating",
)
async def get_rating(post_id: UUID, service: PostServiceDep) -> RatingResponse:
    average, count = await service.rating(post_id)
    return RatingResponse(average=average, count=count)
