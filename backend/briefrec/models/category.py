"""Category model and the brief/category association table."""

from sqlalchemy import Column, String, Table, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from briefrec.models.base import Base, TimestampMixin, UUIDMixin

brief_categories = Table(
    "brief_categories",
    Base.metadata,
    Column("brief_id", UUID(as_uuid=True), ForeignKey("briefs.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", UUID(as_uuid=True), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Category(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "categories"

    name = Column(String(100), unique=True, nullable=False, index=True)

    briefs = relationship("Brief", secondary=brief_categories, back_populates="categories")
