"""Initial schema — users, categories, briefs, citations and engagement tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _user_brief_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("brief_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("briefs.id", ondelete="CASCADE"), nullable=False),
    ]


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("name", sa.String(100)),
        sa.Column("is_active", sa.Boolean, server_default=sa.text("true"), nullable=False),
        *_timestamps(),
    )

    # Categories
    op.create_table(
        "categories",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False, index=True),
        *_timestamps(),
    )

    # Briefs
    op.create_table(
        "briefs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("author_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("abstract", sa.Text),
        sa.Column("view_count", sa.Integer, server_default=sa.text("0"), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_briefs_created", "briefs", ["created_at"])

    op.create_table(
        "brief_categories",
        sa.Column("brief_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("briefs.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("category_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
    )

    # Citations
    op.create_table(
        "brief_sources",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("brief_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("briefs.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column("title", sa.String(500)),
        *_timestamps(),
    )

    # Engagement
    op.create_table(
        "reviews",
        *_user_brief_columns(),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("content", sa.Text),
        *_timestamps(),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    op.create_index("ix_reviews_brief_id", "reviews", ["brief_id"])

    op.create_table(
        "brief_upvotes",
        *_user_brief_columns(),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "brief_id", name="uq_brief_upvotes_user_brief"),
    )
    op.create_index("ix_brief_upvotes_user_id", "brief_upvotes", ["user_id"])
    op.create_index("ix_brief_upvotes_brief_id", "brief_upvotes", ["brief_id"])

    op.create_table(
        "saved_briefs",
        *_user_brief_columns(),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "brief_id", name="uq_saved_briefs_user_brief"),
    )
    op.create_index("ix_saved_briefs_user_id", "saved_briefs", ["user_id"])
    op.create_index("ix_saved_briefs_brief_id", "saved_briefs", ["brief_id"])

    op.create_table(
        "brief_views",
        *_user_brief_columns(),
        *_timestamps(),
    )
    op.create_index("idx_brief_views_user", "brief_views", ["user_id"])
    op.create_index("idx_brief_views_brief", "brief_views", ["brief_id"])


def downgrade() -> None:
    op.drop_table("brief_views")
    op.drop_table("saved_briefs")
    op.drop_table("brief_upvotes")
    op.drop_table("reviews")
    op.drop_table("brief_sources")
    op.drop_table("brief_categories")
    op.drop_table("briefs")
    op.drop_table("categories")
    op.drop_table("users")
