"""SQLAlchemy-backed activity source and profile store (sync sessions, used by Celery workers)."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from briefrec.models.user import User
from briefrec.models.brief import Brief
from briefrec.models.engagement import Review, BriefUpvote, SavedBrief, BriefView
from briefrec.models.recommendation_profile import RecommendationProfile
from briefrec.schemas.profile import ProfileData, PROFILE_SCHEMA_VERSION
from briefrec.services.activity import ActivitySource, ProfileStore, BriefRecord, UserActivity

# Everything the score engine and the authored-brief statistics read
CANDIDATE_BRIEF_OPTIONS = (
    selectinload(Brief.categories),
    selectinload(Brief.reviews),
    selectinload(Brief.upvotes),
    selectinload(Brief.author),
)
AUTHORED_BRIEF_OPTIONS = (*CANDIDATE_BRIEF_OPTIONS, selectinload(Brief.sources))


def brief_to_record(brief: Brief, detailed: bool = True, with_citations: bool = False) -> BriefRecord:
    """Convert a Brief row to a BriefRecord.

    With ``detailed=False`` only the fields needed for consumed briefs
    (title, categories, author) are read, so no extra relationships load.
    """
    record = BriefRecord(
        id=str(brief.id),
        title=brief.title or "",
        author_id=str(brief.author_id),
        author_name=brief.author.name if brief.author else None,
        categories=[c.name for c in brief.categories],
        view_count=brief.view_count or 0,
        created_at=brief.created_at,
    )
    if detailed:
        record.ratings = [r.rating for r in brief.reviews]
        record.upvote_count = len(brief.upvotes)
        if with_citations:
            record.citation_urls = [s.url for s in brief.sources]
    return record


def _interacted_query(model, user_id):
    return (
        select(model)
        .where(model.user_id == user_id)
        .options(
            selectinload(model.brief).selectinload(Brief.categories),
            selectinload(model.brief).selectinload(Brief.author),
        )
    )


class SqlActivitySource(ActivitySource):
    def __init__(self, session: Session):
        self.session = session

    def load_user_activity(self, user_id: str) -> UserActivity | None:
        try:
            uid = UUID(str(user_id))
        except ValueError:
            return None
        user = self.session.execute(select(User.id).where(User.id == uid)).scalar_one_or_none()
        if user is None:
            return None

        authored = self.session.execute(
            select(Brief).where(Brief.author_id == uid).options(*AUTHORED_BRIEF_OPTIONS)
        ).scalars().all()

        def consumed(model) -> list[BriefRecord]:
            rows = self.session.execute(_interacted_query(model, uid)).scalars().all()
            return [brief_to_record(row.brief, detailed=False) for row in rows if row.brief is not None]

        return UserActivity(
            user_id=str(uid),
            authored=[brief_to_record(b, with_citations=True) for b in authored],
            reviewed=consumed(Review),
            upvoted=consumed(BriefUpvote),
            saved=consumed(SavedBrief),
            viewed=consumed(BriefView),
        )

    def list_user_ids(self) -> list[str]:
        rows = self.session.execute(select(User.id).order_by(User.created_at)).scalars().all()
        return [str(uid) for uid in rows]


class SqlProfileStore(ProfileStore):
    def __init__(self, session: Session):
        self.session = session

    def upsert_profile(self, user_id: str, data: ProfileData) -> RecommendationProfile:
        uid = UUID(str(user_id))
        try:
            profile = self.session.execute(
                select(RecommendationProfile).where(RecommendationProfile.user_id == uid)
            ).scalar_one_or_none()

            if not profile:
                profile = RecommendationProfile(user_id=uid)
                self.session.add(profile)

            # Full replace: every computed field is overwritten
            for attr, value in data.model_dump().items():
                setattr(profile, attr, value)
            profile.schema_version = PROFILE_SCHEMA_VERSION
            profile.search_keywords = []
            profile.last_search_queries = []

            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return profile
