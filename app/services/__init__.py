from app.services.auth import AuthService
from app.services.media import MediaService
from app.services.posts import PostService
from app.services.users import UserService

__all__ = ["AuthService", "MediaService", "PostService", "UserService"]
