"""Pydantic schemas for RecommendationProfile and its ranked-list entries."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# Bump when the layout of the stored ranked-list entries changes.
PROFILE_SCHEMA_VERSION = 1


class CategoryCount(BaseModel):
    """One ranked category entry."""

    category: str
    count: int = Field(ge=0)


class WordCount(BaseModel):
    """One ranked title-word entry."""

    word: str
    count: int = Field(ge=0)


class InteractedUser(BaseModel):
    """Another author the user engaged with, ranked by interaction count."""

    user_id: str
    name: str
    interaction_count: int = Field(ge=0)


class DomainCount(BaseModel):
    """External citation domain used in the user's own briefs."""

    domain: str
    count: int = Field(ge=0)


class ProfileData(BaseModel):
    """Freshly computed profile content, ready to be written over the stored row."""

    top_created_categories: list[CategoryCount] = []
    top_interacted_categories: list[CategoryCount] = []
    top_combined_categories: list[CategoryCount] = []
    top_created_title_words: list[WordCount] = []
    top_interacted_title_words: list[WordCount] = []
    top_combined_title_words: list[WordCount] = []
    top_interacted_users: list[InteractedUser] = []
    top_citation_domains: list[DomainCount] = []

    total_briefs_created: int = 0
    total_reviews: int = 0
    total_upvotes: int = 0
    total_saves: int = 0
    total_views: int = 0
    total_reviews_received: int = 0
    total_upvotes_received: int = 0

    engagement_score: float = Field(default=0.0, ge=0, le=100)
    content_quality_score: float = Field(default=0.0, ge=0, le=100)

    last_calculated: datetime | None = None


class RecommendationProfileRead(ProfileData):
    """Stored profile output."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    schema_version: int
    created_at: datetime
    updated_at: datetime


class UserSummary(BaseModel):
    """Identity of a profile's owner."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None = None
    email: str


class RecommendationProfileWithUser(RecommendationProfileRead):
    """Stored profile with its owner, for the admin listing."""

    user: UserSummary | None = None
