"""User model — authors and consumers of briefs."""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship

from briefrec.models.base import Base, TimestampMixin, UUIDMixin


class User(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100))
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    briefs = relationship("Brief", back_populates="author", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")
    brief_upvotes = relationship("BriefUpvote", back_populates="user", cascade="all, delete-orphan")
    saved_briefs = relationship("SavedBrief", back_populates="user", cascade="all, delete-orphan")
    brief_views = relationship("BriefView", back_populates="user", cascade="all, delete-orphan")
    recommendation_profile = relationship(
        "RecommendationProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
