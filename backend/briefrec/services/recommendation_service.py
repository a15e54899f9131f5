"""Recommendation service — scores stored briefs for a user (async, for the HTTP layer)."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from briefrec.models.brief import Brief
from briefrec.models.recommendation_profile import RecommendationProfile
from briefrec.schemas.scoring import RecommendationScore
from briefrec.services.activity_loader import CANDIDATE_BRIEF_OPTIONS, brief_to_record
from briefrec.services.score_engine import ProfileSnapshot, rank_briefs, score_brief


async def load_profile_snapshot(db: AsyncSession, user_id: UUID) -> ProfileSnapshot:
    """Snapshot of the user's stored profile; empty when none has been calculated yet."""
    result = await db.execute(
        select(RecommendationProfile).where(RecommendationProfile.user_id == user_id)
    )
    return ProfileSnapshot.from_profile(result.scalar_one_or_none())


async def calculate_recommendation_score(
    db: AsyncSession,
    user_id: UUID,
    brief_id: UUID,
) -> RecommendationScore | None:
    """Score one brief for a user. Returns None if the brief does not exist."""
    result = await db.execute(
        select(Brief).where(Brief.id == brief_id).options(*CANDIDATE_BRIEF_OPTIONS)
    )
    brief = result.scalar_one_or_none()
    if not brief:
        return None

    profile = await load_profile_snapshot(db, user_id)
    return score_brief(profile, brief_to_record(brief))


async def calculate_all_recommendation_scores(
    db: AsyncSession,
    user_id: UUID,
    limit: int | None = None,
) -> list[RecommendationScore]:
    """Score every brief for a user, best first."""
    profile = await load_profile_snapshot(db, user_id)

    result = await db.execute(select(Brief).options(*CANDIDATE_BRIEF_OPTIONS))
    briefs = [brief_to_record(b) for b in result.scalars().all()]

    return rank_briefs(profile, briefs, now=datetime.now(timezone.utc), limit=limit)


async def get_personalized_recommendations(
    db: AsyncSession,
    user_id: UUID,
    limit: int = 10,
) -> list[RecommendationScore]:
    """Top ``limit`` briefs for a user."""
    return await calculate_all_recommendation_scores(db, user_id, limit=limit)
