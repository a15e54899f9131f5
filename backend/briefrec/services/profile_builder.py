"""Profile builder — turns a user's interaction history into a stored RecommendationProfile."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from briefrec.errors import UserNotFound
from briefrec.schemas.profile import ProfileData
from briefrec.schemas.scoring import BulkRecalcResult
from briefrec.services.activity import ActivitySource, ProfileStore, UserActivity
from briefrec.services.frequency import (
    aggregate_categories,
    aggregate_title_words,
    combine_categories,
    combine_title_words,
)
from briefrec.services.interaction_graph import rank_interacted_authors, rank_citation_domains
from briefrec.services.profile_metrics import engagement_score, content_quality_score
from briefrec.services.progress import ProgressHandle, ProgressStore

logger = logging.getLogger(__name__)

TOP_CATEGORIES = 10
TOP_TITLE_WORDS = 20
TOP_INTERACTED_USERS = 10
TOP_CITATION_DOMAINS = 10


class ProfileBuilder:
    """Builds and persists one user's profile.

    ``compute`` is pure; ``build`` loads the activity, reports progress
    through the given handle, and writes the result over any stored profile.
    """

    def __init__(self, source: ActivitySource, store: ProfileStore):
        self.source = source
        self.store = store

    def build(self, user_id: str, progress: ProgressHandle | None = None) -> Any:
        report = progress.report if progress else (lambda percent: None)
        try:
            if progress:
                progress.start()
            report(10)
            activity = self.source.load_user_activity(user_id)
            if activity is None:
                raise UserNotFound(user_id)
            report(25)

            data = self.compute(activity, report=report)

            profile = self.store.upsert_profile(user_id, data)
        except Exception:
            if progress:
                progress.fail()
            logger.exception("Failed to recalculate recommendation profile for user %s", user_id)
            raise

        # The profile is committed; a lost completion mark only leaves the reading stale until its TTL
        try:
            report(100)
        except Exception:
            logger.warning("Could not record completion progress for user %s", user_id, exc_info=True)

        logger.info(
            "Recalculated recommendation profile for user %s (%d created, %d interactions)",
            user_id,
            data.total_briefs_created,
            data.total_reviews + data.total_upvotes + data.total_saves + data.total_views,
        )
        return profile

    def compute(
        self,
        activity: UserActivity,
        report: Callable[[int], None] = lambda percent: None,
        now: datetime | None = None,
    ) -> ProfileData:
        authored = activity.authored
        interacted = activity.interacted

        # Categories
        created_categories = aggregate_categories(c for b in authored for c in b.categories)
        report(35)
        interacted_categories = aggregate_categories(c for b in interacted for c in b.categories)
        combined_categories = combine_categories(created_categories, interacted_categories)
        report(50)

        # Title words
        created_words = aggregate_title_words(b.title for b in authored)
        interacted_words = aggregate_title_words(b.title for b in interacted)
        combined_words = combine_title_words(created_words, interacted_words)
        report(65)

        briefs_created = len(authored)
        reviews_given = len(activity.reviewed)
        upvotes_given = len(activity.upvoted)
        saves = len(activity.saved)
        report(75)

        interacted_users = rank_interacted_authors(activity.user_id, activity.reviewed, activity.upvoted)
        citation_domains = rank_citation_domains(url for b in authored for url in b.citation_urls)
        report(85)

        data = ProfileData(
            top_created_categories=created_categories[:TOP_CATEGORIES],
            top_interacted_categories=interacted_categories[:TOP_CATEGORIES],
            top_combined_categories=combined_categories[:TOP_CATEGORIES],
            top_created_title_words=created_words[:TOP_TITLE_WORDS],
            top_interacted_title_words=interacted_words[:TOP_TITLE_WORDS],
            top_combined_title_words=combined_words[:TOP_TITLE_WORDS],
            top_interacted_users=interacted_users[:TOP_INTERACTED_USERS],
            top_citation_domains=citation_domains[:TOP_CITATION_DOMAINS],
            total_briefs_created=briefs_created,
            total_reviews=reviews_given,
            total_upvotes=upvotes_given,
            total_saves=saves,
            total_views=len(activity.viewed),
            total_reviews_received=sum(len(b.ratings) for b in authored),
            total_upvotes_received=sum(b.upvote_count for b in authored),
            engagement_score=engagement_score(briefs_created, reviews_given, upvotes_given, saves),
            content_quality_score=content_quality_score(b.ratings for b in authored),
            last_calculated=now or datetime.now(timezone.utc),
        )
        report(95)
        return data


def recalculate_profiles(
    user_ids: Iterable[str],
    run_one: Callable[[str], Any],
    progress: ProgressStore | None = None,
    max_workers: int = 4,
) -> BulkRecalcResult:
    """Run every user's pipeline concurrently and tally the outcomes.

    ``run_one`` recalculates a single user (opening its own session). A
    failure for one user is recorded and never stops the others.
    """
    user_ids = [str(uid) for uid in user_ids]
    result = BulkRecalcResult(total=len(user_ids))

    if progress is not None:
        for uid in user_ids:
            progress.start(uid)

    if not user_ids:
        return result

    with ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="profile-recalc") as pool:
        futures = {pool.submit(run_one, uid): uid for uid in user_ids}
        for future in as_completed(futures):
            uid = futures[future]
            try:
                future.result()
                result.successful += 1
            except Exception as e:
                result.failed += 1
                result.failures[uid] = str(e) or e.__class__.__name__

    logger.info(
        "Recalculated %d recommendation profiles: %d successful, %d failed",
        result.total, result.successful, result.failed,
    )
    return result
