"""Brief model — the published research artifact being recommended."""

from sqlalchemy import Column, String, Text, Integer, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from briefrec.models.base import Base, TimestampMixin, UUIDMixin
from briefrec.models.category import brief_categories


class Brief(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "briefs"

    author_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    abstract = Column(Text)
    view_count = Column(Integer, default=0, server_default="0", nullable=False)

    # Relationships
    author = relationship("User", back_populates="briefs")
    categories = relationship("Category", secondary=brief_categories, back_populates="briefs")
    sources = relationship("BriefSource", back_populates="brief", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="brief", cascade="all, delete-orphan")
    upvotes = relationship("BriefUpvote", back_populates="brief", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_briefs_created", "created_at"),
    )


class BriefSource(UUIDMixin, TimestampMixin, Base):
    """External citation attached to a brief."""

    __tablename__ = "brief_sources"

    brief_id = Column(UUID(as_uuid=True), ForeignKey("briefs.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(Text, nullable=False)
    title = Column(String(500))

    brief = relationship("Brief", back_populates="sources")
