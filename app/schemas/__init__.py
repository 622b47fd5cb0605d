from app.schemas.auth import AuthResponse, LoginRequest, SignupRequest, TokenData
from app.schemas.common import SuccessResponse
from app.schemas.post import (
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
    PurchasedPost,
    PurchaseListResponse,
    PurchaseResponse,
    RatingCreate,
    RatingResponse,
    SaveResponse,
)
from app.schemas.user import (
    UserEnvelope,
    UserListResponse,
    UserResponse,
    UserRoleUpdate,
    UserStatusUpdate,
    UserUpdate,
)

__all__ = [
    "AuthResponse",
    "CommentCreate",
    "CommentEnvelope",
    "CommentListResponse",
    "CommentResponse",
    "DownloadResponse",
    "LikeResponse",
    "LoginRequest",
    "PostEnvelope",
    "PostListResponse",
    "PostResponse",
    "PostUpdate",
    "PurchasedPost",
    "PurchaseListResponse",
    "PurchaseResponse",
    "RatingCreate",
    "RatingResponse",
    "SaveResponse",
    "SignupRequest",
    "SuccessResponse",
    "TokenData",
    "UserEnvelope",
    "UserListResponse",
    "UserResponse",
    "UserRoleUpdate",
    "UserStatusUpdate",
    "UserUpdate",
]
