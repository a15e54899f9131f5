"""Recommendation profile model — one behavioral taste profile per user."""

from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship

from briefrec.models.base import Base, TimestampMixin, UUIDMixin
from briefrec.schemas.profile import PROFILE_SCHEMA_VERSION


class RecommendationProfile(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "recommendation_profiles"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    schema_version = Column(Integer, server_default=str(PROFILE_SCHEMA_VERSION), nullable=False, default=PROFILE_SCHEMA_VERSION)

    # Ranked lists — JSONB arrays sorted by count descending
    top_created_categories = Column(JSONB, server_default="[]", nullable=False, default=list)
    top_interacted_categories = Column(JSONB, server_default="[]", nullable=False, default=list)
    top_combined_categories = Column(JSONB, server_default="[]", nullable=False, default=list)
    top_created_title_words = Column(JSONB, server_default="[]", nullable=False, default=list)
    top_interacted_title_words = Column(JSONB, server_default="[]", nullable=False, default=list)
    top_combined_title_words = Column(JSONB, server_default="[]", nullable=False, default=list)
    top_interacted_users = Column(JSONB, server_default="[]", nullable=False, default=list)
    top_citation_domains = Column(JSONB, server_default="[]", nullable=False, default=list)
    search_keywords = Column(JSONB, server_default="[]", nullable=False, default=list)
    last_search_queries = Column(JSONB, server_default="[]", nullable=False, default=list)

    # Counters
    total_briefs_created = Column(Integer, server_default="0", nullable=False, default=0)
    total_reviews = Column(Integer, server_default="0", nullable=False, default=0)
    total_upvotes = Column(Integer, server_default="0", nullable=False, default=0)
    total_saves = Column(Integer, server_default="0", nullable=False, default=0)
    total_views = Column(Integer, server_default="0", nullable=False, default=0)
    total_reviews_received = Column(Integer, server_default="0", nullable=False, default=0)
    total_upvotes_received = Column(Integer, server_default="0", nullable=False, default=0)

    # Derived metrics, both in [0, 100]
    engagement_score = Column(Float, server_default="0", nullable=False, default=0.0)
    content_quality_score = Column(Float, server_default="0", nullable=False, default=0.0)

    last_calculated = Column(DateTime(timezone=True))

    # Relationships
    user = relationship("User", back_populates="recommendation_profile")
