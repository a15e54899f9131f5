"""Recommendation API endpoints — profile recalculation, progress polling and scores."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from briefrec.config import get_settings
from briefrec.models.base import get_db
from briefrec.models.user import User
from briefrec.models.recommendation_profile import RecommendationProfile
from briefrec.schemas.profile import RecommendationProfileRead, RecommendationProfileWithUser, UserSummary
from briefrec.schemas.scoring import RecommendationScore, ProgressReading, RecalcDispatch
from briefrec.services.progress import ProgressStore, get_progress_store, to_reading
from briefrec.services.recommendation_service import (
    calculate_recommendation_score,
    calculate_all_recommendation_scores,
    get_personalized_recommendations,
)
from briefrec.services.score_engine import decode_stored_profile

router = APIRouter(prefix="/recommendations", tags=["recommendations"])
settings = get_settings()


async def _require_user(db: AsyncSession, user_id: UUID) -> None:
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise HTTPException(status_code=404, detail="User not found")


# --- Profiles ---

@router.get("/profiles", response_model=list[RecommendationProfileWithUser])
async def list_profiles(
    db: AsyncSession = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
):
    """List stored recommendation profiles, most recently calculated first."""
    query = (
        select(RecommendationProfile)
        .options(selectinload(RecommendationProfile.user))
        .order_by(RecommendationProfile.last_calculated.desc().nulls_last())
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)
    profiles = result.scalars().all()

    return [
        RecommendationProfileWithUser(
            **decode_stored_profile(profile).model_dump(),
            user=UserSummary.model_validate(profile.user) if profile.user else None,
        )
        for profile in profiles
    ]


@router.get("/profiles/{user_id}", response_model=RecommendationProfileRead)
async def get_profile(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a user's stored recommendation profile."""
    result = await db.execute(
        select(RecommendationProfile).where(RecommendationProfile.user_id == user_id)
    )
    profile = result.scalar_one_or_none()
    if not profile:
        raise HTTPException(status_code=404, detail="Recommendation profile not found")
    return decode_stored_profile(profile)


@router.post("/profiles/recalculate-all", response_model=RecalcDispatch, status_code=202)
async def recalculate_all():
    """Queue recalculation of every user's profile."""
    from briefrec.tasks.profile_tasks import recalculate_all_profiles
    task = recalculate_all_profiles.delay()
    return RecalcDispatch(task_id=task.id)


@router.post("/profiles/{user_id}/recalculate", response_model=RecalcDispatch, status_code=202)
async def recalculate_profile(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    progress: ProgressStore = Depends(get_progress_store),
):
    """Queue recalculation of one user's profile. Poll /progress/{user_id} for completion."""
    await _require_user(db, user_id)

    from briefrec.tasks.profile_tasks import recalculate_user_profile
    progress.start(str(user_id))
    task = recalculate_user_profile.delay(str(user_id))
    return RecalcDispatch(task_id=task.id, user_id=str(user_id))


# --- Progress ---

@router.get("/progress", response_model=list[ProgressReading])
async def list_progress(progress: ProgressStore = Depends(get_progress_store)):
    """Progress of every in-flight recalculation. Finished entries are returned once, then dropped."""
    return [to_reading(key, value) for key, value in sorted(progress.poll_all().items())]


@router.get("/progress/{user_id}", response_model=ProgressReading)
async def get_progress(
    user_id: UUID,
    progress: ProgressStore = Depends(get_progress_store),
):
    """Progress of one user's recalculation."""
    value = progress.poll(str(user_id))
    if value is None:
        raise HTTPException(status_code=404, detail="No recalculation in progress")
    return to_reading(str(user_id), value)


# --- Scores ---

@router.get("/users/{user_id}/personalized", response_model=list[RecommendationScore])
async def personalized(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    limit: int = Query(settings.personalized_default_limit, ge=1, le=100),
):
    """Top briefs for a user."""
    return await get_personalized_recommendations(db, user_id, limit=limit)


@router.get("/users/{user_id}/scores", response_model=list[RecommendationScore])
async def all_scores(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Every brief scored for a user, best first."""
    return await calculate_all_recommendation_scores(db, user_id)


@router.get("/users/{user_id}/scores/{brief_id}", response_model=RecommendationScore)
async def brief_score(
    user_id: UUID,
    brief_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Score and reasons for one brief."""
    score = await calculate_recommendation_score(db, user_id, brief_id)
    if score is None:
        raise HTTPException(status_code=404, detail="Brief not found")
    return score
