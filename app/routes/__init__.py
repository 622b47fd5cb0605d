from app.routes.auth import router as auth_router
from app.routes.posts import router as posts_router
from app.routes.users import router as users_router

__all__ = ["auth_router", "posts_router", "users_router"]
