"""Score engine — weighted relevance of a candidate brief for one user's profile.

raw = category (35) + author (25) + quality (20) + popularity (15) + recency (5)

The raw sum then goes through a fixed shaping curve (not a population
normalization):

    raw < 20        ->  raw = 20 + raw * 0.5
    score           =   (raw / 100) ** 0.7 * 100
    score > 70      ->  score = 70 + (score - 70) * 1.5
    clamp to [15, 100]

Missing profile or brief data counts as zero (or the component floor),
never as an error.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import TypeAdapter, ValidationError

from briefrec.errors import ProfileDecodeError
from briefrec.schemas.profile import (
    CategoryCount,
    DomainCount,
    InteractedUser,
    RecommendationProfileRead,
    WordCount,
    PROFILE_SCHEMA_VERSION,
)
from briefrec.schemas.scoring import RecommendationScore
from briefrec.services.activity import BriefRecord

logger = logging.getLogger(__name__)

# Category affinity
CATEGORY_WEIGHT = 35
CATEGORY_FLOOR = 10
MATCH_RATIO_SHARE = 0.6
INTEREST_RATIO_SHARE = 0.4

# Author affinity: full points at AUTHOR_SATURATION interactions
AUTHOR_WEIGHT = 25
AUTHOR_SATURATION = 10

# Quality
QUALITY_WEIGHT = 20
QUALITY_FLOOR = 5
MAX_RATING = 5

# Popularity
VIEW_POINTS_MAX = 10
VIEWS_PER_POINT = 100
UPVOTE_POINTS_MAX = 5
POPULARITY_REASON_THRESHOLD = 5

# Recency
RECENCY_WEIGHT = 5
RECENCY_WINDOW_DAYS = 7

# Shaping curve
LOW_SCORE_THRESHOLD = 20
LOW_SCORE_DAMPING = 0.5
COMPRESSION_EXPONENT = 0.7
HIGH_SCORE_THRESHOLD = 70
HIGH_SCORE_STRETCH = 1.5
MIN_SCORE = 15
MAX_SCORE = 100

GENERAL_REASON = "General content recommendation"

_CATEGORY_LIST = TypeAdapter(list[CategoryCount])
_WORD_LIST = TypeAdapter(list[WordCount])
_INTERACTED_USER_LIST = TypeAdapter(list[InteractedUser])
_DOMAIN_LIST = TypeAdapter(list[DomainCount])

# Every JSONB ranked list on a stored profile and the entry type it holds
STORED_RANKED_LISTS = {
    "top_created_categories": _CATEGORY_LIST,
    "top_interacted_categories": _CATEGORY_LIST,
    "top_combined_categories": _CATEGORY_LIST,
    "top_created_title_words": _WORD_LIST,
    "top_interacted_title_words": _WORD_LIST,
    "top_combined_title_words": _WORD_LIST,
    "top_interacted_users": _INTERACTED_USER_LIST,
    "top_citation_domains": _DOMAIN_LIST,
}


def decode_ranked_list(raw: Any, adapter: TypeAdapter, field_name: str) -> list:
    """Decode one stored ranked list; JSON strings and plain lists are accepted."""
    if raw is None:
        return []
    try:
        if isinstance(raw, (str, bytes)):
            return adapter.validate_json(raw)
        return adapter.validate_python(raw)
    except (ValidationError, ValueError, TypeError) as e:
        raise ProfileDecodeError(field_name, (str(e).splitlines() or [""])[0]) from e


def _decode_stored_list(profile: Any, field_name: str) -> list | None:
    """Decode one ranked list of a stored profile, or None when it is unusable."""
    version = getattr(profile, "schema_version", PROFILE_SCHEMA_VERSION)
    try:
        if version != PROFILE_SCHEMA_VERSION:
            raise ProfileDecodeError(field_name, f"unsupported schema version {version}")
        return decode_ranked_list(getattr(profile, field_name, None), STORED_RANKED_LISTS[field_name], field_name)
    except ProfileDecodeError as e:
        logger.warning("Ignoring stored profile data for user %s: %s", getattr(profile, "user_id", "?"), e)
        return None


def decode_stored_profile(profile: Any) -> RecommendationProfileRead:
    """Read model for a stored profile row; malformed ranked lists come back empty."""
    values = {
        name: getattr(profile, name)
        for name in RecommendationProfileRead.model_fields
        if getattr(profile, name, None) is not None
    }
    for field_name in STORED_RANKED_LISTS:
        values[field_name] = _decode_stored_list(profile, field_name) or []
    return RecommendationProfileRead.model_validate(values)


@dataclass
class ProfileSnapshot:
    """The parts of a stored profile the score engine reads."""

    categories: list[CategoryCount] = field(default_factory=list)
    interacted_users: list[InteractedUser] = field(default_factory=list)
    decode_errors: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "ProfileSnapshot":
        return cls()

    @classmethod
    def from_profile(cls, profile: Any) -> "ProfileSnapshot":
        """Build a snapshot from a RecommendationProfile row (or anything shaped like one).

        A malformed ranked list is replaced by an empty one and noted in
        ``decode_errors``.
        """
        if profile is None:
            return cls.empty()

        snapshot = cls()
        fields = (
            ("top_combined_categories", "categories"),
            ("top_interacted_users", "interacted_users"),
        )
        for field_name, attr in fields:
            decoded = _decode_stored_list(profile, field_name)
            if decoded is None:
                snapshot.decode_errors.append(field_name)
            else:
                setattr(snapshot, attr, decoded)
        return snapshot


def category_affinity(profile_categories: list[CategoryCount], brief_categories: list[str]) -> tuple[float, str]:
    candidate = set(brief_categories)
    matches = [c for c in profile_categories if c.category in candidate]
    if not matches:
        return CATEGORY_FLOOR, GENERAL_REASON

    match_ratio = min(1.0, len(matches) / len(candidate))
    total_interest = sum(c.count for c in profile_categories)
    interest_ratio = sum(c.count for c in matches) / total_interest if total_interest > 0 else 0.0

    points = (match_ratio * MATCH_RATIO_SHARE + interest_ratio * INTEREST_RATIO_SHARE) * CATEGORY_WEIGHT
    names = ", ".join(c.category for c in matches)
    return points, f"Strong category match: {names} ({round(match_ratio * 100)}% coverage)"


def author_affinity(interacted_users: list[InteractedUser], brief: BriefRecord) -> tuple[float, str | None]:
    author_id = str(brief.author_id)
    for user in interacted_users:
        if user.user_id == author_id:
            points = min(AUTHOR_WEIGHT, (user.interaction_count / AUTHOR_SATURATION) * AUTHOR_WEIGHT)
            name = brief.author_name or user.name or "Unknown"
            return points, f"From frequently interacted author: {name} ({user.interaction_count} interactions)"
    return 0.0, None


def quality_score(ratings: list[int]) -> tuple[float, str | None]:
    if not ratings:
        return QUALITY_FLOOR, None
    avg = sum(ratings) / len(ratings)
    points = (avg / MAX_RATING) * QUALITY_WEIGHT
    return points, f"High quality: {avg:.1f}/5 rating ({len(ratings)} reviews)"


def popularity_score(view_count: int, upvote_count: int) -> tuple[float, str | None]:
    views = max(0, view_count or 0)
    upvotes = max(0, upvote_count or 0)
    points = min(VIEW_POINTS_MAX, views / VIEWS_PER_POINT) + min(UPVOTE_POINTS_MAX, upvotes)
    if points > POPULARITY_REASON_THRESHOLD:
        return points, f"Popular content: {views} views, {upvotes} upvotes"
    return points, None


def recency_score(created_at: datetime | None, now: datetime) -> tuple[float, str | None]:
    if created_at is None:
        return 0.0, None
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    age_days = max(0.0, (now - created_at).total_seconds() / 86400)
    if age_days > RECENCY_WINDOW_DAYS:
        return 0.0, None
    points = ((RECENCY_WINDOW_DAYS - age_days) / RECENCY_WINDOW_DAYS) * RECENCY_WEIGHT
    return points, f"Recent publication: {round(age_days)} days ago"


def shape_score(raw: float) -> float:
    """Apply the fixed shaping curve to a raw weighted sum."""
    score = max(0.0, raw)
    if score < LOW_SCORE_THRESHOLD:
        score = LOW_SCORE_THRESHOLD + score * LOW_SCORE_DAMPING
    score = (score / 100) ** COMPRESSION_EXPONENT * 100
    if score > HIGH_SCORE_THRESHOLD:
        score = HIGH_SCORE_THRESHOLD + (score - HIGH_SCORE_THRESHOLD) * HIGH_SCORE_STRETCH
    return min(MAX_SCORE, max(MIN_SCORE, score))


def raw_score(profile: ProfileSnapshot, brief: BriefRecord, now: datetime | None = None) -> tuple[float, list[str]]:
    """Sum the five weighted components, collecting reasons in component order."""
    now = now or datetime.now(timezone.utc)
    components = (
        category_affinity(profile.categories, brief.categories),
        author_affinity(profile.interacted_users, brief),
        quality_score(brief.ratings),
        popularity_score(brief.view_count, brief.upvote_count),
        recency_score(brief.created_at, now),
    )
    total = sum(points for points, _ in components)
    reasons = [reason for _, reason in components if reason]
    return total, reasons


def score_brief(profile: ProfileSnapshot, brief: BriefRecord, now: datetime | None = None) -> RecommendationScore:
    total, reasons = raw_score(profile, brief, now)
    return RecommendationScore(brief_id=str(brief.id), score=shape_score(total), reasons=reasons)


def rank_briefs(
    profile: ProfileSnapshot,
    briefs: Iterable[BriefRecord],
    now: datetime | None = None,
    limit: int | None = None,
) -> list[RecommendationScore]:
    """Score every brief and return them best first (ties broken by brief id)."""
    now = now or datetime.now(timezone.utc)
    scores = [score_brief(profile, brief, now) for brief in briefs]
    scores.sort(key=lambda s: (-s.score, s.brief_id))
    if limit is not None:
        scores = scores[:max(0, limit)]
    return scores
