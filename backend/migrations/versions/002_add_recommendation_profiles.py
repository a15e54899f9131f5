"""Add recommendation profiles.

Creates:
- recommendation_profiles: one behavioral taste profile per user
  (JSONB ranked lists, activity counters, engagement/quality scores)

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

RANKED_LISTS = (
    "top_created_categories",
    "top_interacted_categories",
    "top_combined_categories",
    "top_created_title_words",
    "top_interacted_title_words",
    "top_combined_title_words",
    "top_interacted_users",
    "top_citation_domains",
    "search_keywords",
    "last_search_queries",
)

COUNTERS = (
    "total_briefs_created",
    "total_reviews",
    "total_upvotes",
    "total_saves",
    "total_views",
    "total_reviews_received",
    "total_upvotes_received",
)


def upgrade() -> None:
    op.create_table(
        "recommendation_profiles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False),
        sa.Column("schema_version", sa.Integer, server_default=sa.text("1"), nullable=False),
        *[sa.Column(name, JSONB, server_default=sa.text("'[]'::jsonb"), nullable=False) for name in RANKED_LISTS],
        *[sa.Column(name, sa.Integer, server_default=sa.text("0"), nullable=False) for name in COUNTERS],
        sa.Column("engagement_score", sa.Float, server_default=sa.text("0"), nullable=False),
        sa.Column("content_quality_score", sa.Float, server_default=sa.text("0"), nullable=False),
        sa.Column("last_calculated", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("engagement_score BETWEEN 0 AND 100", name="ck_profiles_engagement_range"),
        sa.CheckConstraint("content_quality_score BETWEEN 0 AND 100", name="ck_profiles_quality_range"),
    )
    op.create_index("idx_recommendation_profiles_user", "recommendation_profiles", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_table("recommendation_profiles")
