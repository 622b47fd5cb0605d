# app/dependencies/dependencies.py

"""Application dependencies: repositories, services and caller resolution."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import settings
from app.db import get_session
from app.errors import UserAuthenticationError
from app.models import UserDB
from app.monitoring import get_logger
from app.rabc import RolePermissionTable
from app.repositories import PostRepository, UserRepository
from app.services import AuthService, MediaService, PostService, UserService
from app.utils.helpers import parse_tags

logger = get_logger(__name__)

cookie_scheme = APIKeyCookie(name=settings.AUTH_COOKIE_NAME, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_user_repository(session: SessionDep) -> UserRepository:
    """
    Resolve the `UserRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    UserRepository
        Repository instance bound to the session.
    """
    return UserRepository(session)


def get_post_repository(session: SessionDep) -> PostRepository:
    return PostRepository(session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]


def get_media_service() -> MediaService:
    return MediaService()


MediaDep = Annotated[MediaService, Depends(get_media_service)]


def get_auth_service(user_repo: UserRepoDep) -> AuthService:
    return AuthService(user_repo)


def get_user_service(user_repo: UserRepoDep, post_repo: PostRepoDep, media: MediaDep) -> UserService:
    return UserService(user_repo, post_repo, media)


def get_post_service(post_repo: PostRepoDep, user_repo: UserRepoDep, media: MediaDep) -> PostService:
    return PostService(post_repo, user_repo, media)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]


def get_permission_table(request: Request) -> RolePermissionTable:
    """Return the permission table installed on the application at startup."""
    return request.app.state.permission_table


async def get_current_user(
    auth_service: AuthServiceDep,
    cookie_token: Annotated[str | None, Depends(cookie_scheme)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> UserDB:
    """
    Authenticate the caller from the session cookie or a bearer token.

    Parameters
    ----------
    auth_service : AuthService
        Service resolving tokens to accounts.
    cookie_token : str | None
        Value of the session cookie, if sent.
    credentials : HTTPAuthorizationCredentials | None
        ``Authorization: Bearer`` credentials, if sent.

    Returns
    -------
    UserDB
        The authenticated, non-suspended account.

    Raises
    ------
    UserAuthenticationError
        When no valid credential identifies an active account.
    """
    bearer_token = credentials.credentials if credentials else None
    try:
        return await auth_service.resolve_caller(cookie_token, bearer_token)
    except UserAuthenticationError as e:
        logger.info("Authentication rejected", kind=e.kind)
        raise


CurrentUserDep = Annotated[UserDB, Depends(get_current_user)]


@dataclass(frozen=True)
class UserListQuery:
    """
    Query container for account listing.

    Parameters
    ----------
    skip : int
        Number of records to skip.
    limit : int
        Maximum number of records to return.
    """

    skip: int = 0
    limit: int = 10


def get_user_list_query(
    skip: Annotated[int, Query(ge=0, description="Number of records to skip")] = 0,
    limit: Annotated[
        int,
        Query(ge=1, le=100, description="Maximum number of records to return"),
    ] = 10,
) -> UserListQuery:
    return UserListQuery(skip=skip, limit=limit)


UserQueryListDep = Annotated[UserListQuery, Depends(get_user_list_query)]


@dataclass(frozen=True)
class PostListQuery:
    """
    Query container for the public post listing.

    Parameters
    ----------
    page : int
        1-based page number.
    limit : int
        Page size.
    category : str | None
        Optional exact category filter.
    tags : list[str] | None
        Optional tags; a post matches when it carries any of them.
    """

    page: int = 1
    limit: int = 10
    category: str | None = None
    tags: list[str] | None = None


def get_post_list_query(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Posts per page")] = 10,
    category: Annotated[str | None, Query(description="Category filter")] = None,
    tags: Annotated[str | None, Query(description="Comma-separated tags")] = None,
) -> PostListQuery:
    """
    Dependency to construct `PostListQuery` from query parameters.

    Returns
    -------
    PostListQuery
        Aggregated query parameters object.
    """
    return PostListQuery(
        page=page,
        limit=limit,
        category=category or None,
        tags=parse_tags(tags) or None,
    )


PostQueryListDep = Annotated[PostListQuery, Depends(get_post_list_query)]


@dataclass(frozen=True)
class PageQuery:
    """Page number and size for per-post and per-account listings."""

    page: int = 1
    limit: int = 20


def get_page_query(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
) -> PageQuery:
    return PageQuery(page=page, limit=limit)


PageQueryDep = Annotated[PageQuery, Depends(get_page_query)]
