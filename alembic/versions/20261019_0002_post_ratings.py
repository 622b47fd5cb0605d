"""
Post ratings.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

Adds post_ratings: one 1-5 star value per (account, post).
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "0002"
down_revision: str | Sequence[str] | None = "0001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "post_ratings",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("post_id", sa.UUID(), nullable=False),
        sa.Column("value", sa.SmallInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("value BETWEEN 1 AND 5", name="ck_post_ratings_value_range"),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_post_ratings_user_post"),
    )
    op.create_index("ix_post_ratings_post_id", "post_ratings", ["post_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_post_ratings_post_id", table_name="post_ratings")
    op.drop_table("post_ratings")
