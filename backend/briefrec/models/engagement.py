"""Engagement models — reviews, upvotes, saves and views a user performs on briefs."""

from sqlalchemy import Column, Integer, Text, ForeignKey, UniqueConstraint, CheckConstraint, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from briefrec.models.base import Base, TimestampMixin, UUIDMixin


class Review(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "reviews"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    brief_id = Column(UUID(as_uuid=True), ForeignKey("briefs.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    content = Column(Text)

    user = relationship("User", back_populates="reviews")
    brief = relationship("Brief", back_populates="reviews")

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )


class BriefUpvote(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "brief_upvotes"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    brief_id = Column(UUID(as_uuid=True), ForeignKey("briefs.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="brief_upvotes")
    brief = relationship("Brief", back_populates="upvotes")

    __table_args__ = (
        UniqueConstraint("user_id", "brief_id", name="uq_brief_upvotes_user_brief"),
    )


class SavedBrief(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "saved_briefs"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    brief_id = Column(UUID(as_uuid=True), ForeignKey("briefs.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="saved_briefs")
    brief = relationship("Brief")

    __table_args__ = (
        UniqueConstraint("user_id", "brief_id", name="uq_saved_briefs_user_brief"),
    )


class BriefView(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "brief_views"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    brief_id = Column(UUID(as_uuid=True), ForeignKey("briefs.id", ondelete="CASCADE"), nullable=False)

    user = relationship("User", back_populates="brief_views")
    brief = relationship("Brief")

    __table_args__ = (
        Index("idx_brief_views_user", "user_id"),
        Index("idx_brief_views_brief", "brief_id"),
    )
