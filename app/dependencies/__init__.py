# app/dependencies/__init__.py

from app.dependencies.dependencies import (
    AuthServiceDep,
    CurrentUserDep,
    MediaDep,
    PageQuery,
    PageQueryDep,
    PostListQuery,
    PostQueryListDep,
    PostRepoDep,
    PostServiceDep,
    UserListQuery,
    UserQueryListDep,
    UserRepoDep,
    UserServiceDep,
    get_auth_service,
    get_current_user,
    get_media_service,
    get_page_query,
    get_permission_table,
    get_post_repository,
    get_post_service,
    get_user_repository,
    get_user_service,
)

__all__ = [
    "AuthServiceDep",
    "CurrentUserDep",
    "MediaDep",
    "PageQuery",
    "PageQueryDep",
    "PostListQuery",
    "PostQueryListDep",
    "PostRepoDep",
    "PostServiceDep",
    "UserListQuery",
    "UserQueryListDep",
    "UserRepoDep",
    "UserServiceDep",
    "get_auth_service",
    "get_current_user",
    "get_media_service",
    "get_page_query",
    "get_permission_table",
    "get_post_repository",
    "get_post_service",
    "get_user_repository",
    "get_user_service",
]
