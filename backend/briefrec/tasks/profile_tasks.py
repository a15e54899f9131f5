"""Celery tasks for recommendation profile recalculation."""

import logging

from briefrec.config import get_settings
from briefrec.tasks.celery_app import celery_app
from briefrec.models.base import SyncSessionLocal

# Import ALL models to ensure relationships resolve
from briefrec.models.user import User  # noqa: F401
from briefrec.models.category import Category  # noqa: F401
from briefrec.models.brief import Brief, BriefSource  # noqa: F401
from briefrec.models.engagement import Review, BriefUpvote, SavedBrief, BriefView  # noqa: F401
from briefrec.models.recommendation_profile import RecommendationProfile  # noqa: F401
from briefrec.services.activity_loader import SqlActivitySource, SqlProfileStore
from briefrec.services.profile_builder import ProfileBuilder, recalculate_profiles
from briefrec.services.progress import ProgressHandle, ProgressStore, get_progress_store

logger = logging.getLogger(__name__)


def run_profile_pipeline(user_id: str, progress: ProgressStore | None = None) -> dict:
    """Recalculate one user's profile in its own session."""
    with SyncSessionLocal() as session:
        builder = ProfileBuilder(SqlActivitySource(session), SqlProfileStore(session))
        handle = ProgressHandle(progress, user_id) if progress else None
        profile = builder.build(user_id, progress=handle)
        return {
            "user_id": str(user_id),
            "engagement_score": profile.engagement_score,
            "content_quality_score": profile.content_quality_score,
            "last_calculated": profile.last_calculated.isoformat() if profile.last_calculated else None,
        }


@celery_app.task(name="briefrec.tasks.profile_tasks.recalculate_user_profile")
def recalculate_user_profile(user_id: str):
    """Rebuild one user's recommendation profile from their full history."""
    return run_profile_pipeline(user_id, get_progress_store())


@celery_app.task(name="briefrec.tasks.profile_tasks.recalculate_all_profiles")
def recalculate_all_profiles():
    """Rebuild every user's profile (runs nightly via beat, or on demand).

    Returns {total, successful, failed, failures}.
    """
    settings = get_settings()
    progress = get_progress_store()

    with SyncSessionLocal() as session:
        user_ids = SqlActivitySource(session).list_user_ids()

    result = recalculate_profiles(
        user_ids,
        run_one=lambda uid: run_profile_pipeline(uid, progress),
        progress=progress,
        max_workers=settings.recalc_max_workers,
    )
    if result.failed:
        logger.warning("Profile recalculation failed for %d of %d users", result.failed, result.total)
    return result.model_dump()
