"""Database models for the application."""

from app.models.post import CommentDB, PostDB, PurchaseDB, RatingDB, SavedPostDB
from app.models.user import UserDB

__all__ = ["CommentDB", "PostDB", "PurchaseDB", "RatingDB", "SavedPostDB", "UserDB"]
