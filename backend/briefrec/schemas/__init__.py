"""Pydantic schemas package."""

from briefrec.schemas.profile import (
    CategoryCount,
    WordCount,
    InteractedUser,
    DomainCount,
    ProfileData,
    RecommendationProfileRead,
    RecommendationProfileWithUser,
    UserSummary,
)
from briefrec.schemas.scoring import (
    RecommendationScore,
    BulkRecalcResult,
    ProgressReading,
    RecalcDispatch,
)

__all__ = [
    # Profile
    "CategoryCount",
    "WordCount",
    "InteractedUser",
    "DomainCount",
    "ProfileData",
    "RecommendationProfileRead",
    "RecommendationProfileWithUser",
    "UserSummary",
    # Scoring
    "RecommendationScore",
    "BulkRecalcResult",
    "ProgressReading",
    "RecalcDispatch",
]
