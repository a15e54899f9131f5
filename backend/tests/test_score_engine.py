"""Score engine tests."""

import json
import uuid
from datetime import timedelta
from types import SimpleNamespace

import pytest

from briefrec.errors import ProfileDecodeError
from briefrec.schemas.profile import CategoryCount, InteractedUser, RecommendationProfileWithUser, UserSummary
from briefrec.services.score_engine import (
    GENERAL_REASON,
    ProfileSnapshot,
    author_affinity,
    category_affinity,
    decode_ranked_list,
    decode_stored_profile,
    popularity_score,
    rank_briefs,
    raw_score,
    recency_score,
    score_brief,
    shape_score,
)

from conftest import make_brief


def _curve(raw):
    return (raw / 100) ** 0.7 * 100


@pytest.fixture
def profile():
    return ProfileSnapshot(
        categories=[CategoryCount(category="AI", count=10), CategoryCount(category="Health", count=5)],
        interacted_users=[InteractedUser(user_id="ada", name="Ada", interaction_count=4)],
    )


def test_category_match_with_quality_floor(profile, now):
    brief = make_brief(categories=["AI"], author_id="someone", created_at=now - timedelta(days=10))

    result = score_brief(profile, brief, now=now)

    category = 35 * (1.0 * 0.6 + (10 / 15) * 0.4)
    assert category == pytest.approx(30.33, abs=0.01)
    assert result.score == pytest.approx(_curve(category + 5))
    assert result.reasons == ["Strong category match: AI (100% coverage)"]


def test_no_category_match_gets_flat_floor(profile):
    points, reason = category_affinity(profile.categories, ["Astronomy"])
    assert points == 10
    assert reason == GENERAL_REASON


def test_partial_category_match_ratio(profile):
    points, reason = category_affinity(profile.categories, ["Health", "Astronomy"])
    assert points == pytest.approx(35 * (0.5 * 0.6 + (5 / 15) * 0.4))
    assert "50% coverage" in reason


def test_empty_profile_and_bare_brief(now):
    brief = make_brief(created_at=None)

    raw, reasons = raw_score(ProfileSnapshot.empty(), brief, now=now)

    # category floor 10 + quality floor 5
    assert raw == 15
    assert reasons == [GENERAL_REASON]
    assert score_brief(ProfileSnapshot.empty(), brief, now=now).score == pytest.approx(_curve(20 + 15 * 0.5))


def test_author_affinity_scales_with_interactions(profile):
    points, reason = author_affinity(profile.interacted_users, make_brief(author_id="ada", author_name="Ada L."))
    assert points == pytest.approx(10)
    assert reason == "From frequently interacted author: Ada L. (4 interactions)"


def test_author_affinity_capped():
    users = [InteractedUser(user_id="ada", name="Ada", interaction_count=40)]
    points, _ = author_affinity(users, make_brief(author_id="ada"))
    assert points == 25


def test_unknown_author_scores_zero(profile):
    assert author_affinity(profile.interacted_users, make_brief(author_id="grace")) == (0.0, None)


def test_quality_uses_mean_rating(profile, now):
    brief = make_brief(categories=["Astronomy"], ratings=[5, 4, 3], created_at=now - timedelta(days=30))

    raw, reasons = raw_score(profile, brief, now=now)

    assert raw == pytest.approx(10 + (4 / 5) * 20)
    assert "High quality: 4.0/5 rating (3 reviews)" in reasons


def test_popularity_caps_each_part():
    assert popularity_score(250, 2) == (2.5 + 2, None)
    points, reason = popularity_score(5000, 9)
    assert points == 15
    assert reason == "Popular content: 5000 views, 9 upvotes"


def test_recency_window(now):
    assert recency_score(now, now)[0] == pytest.approx(5)
    assert recency_score(now - timedelta(days=3.5), now)[0] == pytest.approx(2.5)
    assert recency_score(now - timedelta(days=10), now) == (0.0, None)


def test_recency_accepts_naive_datetimes(now):
    naive = (now - timedelta(days=1)).replace(tzinfo=None)
    points, reason = recency_score(naive, now)
    assert points == pytest.approx(5 * 6 / 7)
    assert reason == "Recent publication: 1 days ago"


def test_reasons_follow_component_order(profile, now):
    brief = make_brief(
        categories=["AI"], author_id="ada", author_name="Ada",
        ratings=[5], view_count=900, upvote_count=4, created_at=now,
    )

    reasons = score_brief(profile, brief, now=now).reasons

    assert [r.split(":")[0] for r in reasons] == [
        "Strong category match",
        "From frequently interacted author",
        "High quality",
        "Popular content",
        "Recent publication",
    ]


def test_shaping_curve_steps():
    assert shape_score(10) == pytest.approx(_curve(25))
    assert shape_score(50) == pytest.approx(_curve(50))
    stretched = _curve(65)
    assert stretched > 70
    assert shape_score(65) == pytest.approx(70 + (stretched - 70) * 1.5)
    assert shape_score(100) == 100


@pytest.mark.parametrize("raw", [-20, 0, 5, 19.9, 20, 35.3, 60, 70, 85, 100, 250])
def test_shaped_score_always_in_bounds(raw):
    assert 15 <= shape_score(raw) <= 100


def test_maximal_brief_is_clamped_to_100(now):
    profile = ProfileSnapshot(
        categories=[CategoryCount(category="AI", count=1)],
        interacted_users=[InteractedUser(user_id="ada", name="Ada", interaction_count=50)],
    )
    brief = make_brief(categories=["AI"], author_id="ada", ratings=[5], view_count=10_000, upvote_count=50, created_at=now)

    assert score_brief(profile, brief, now=now).score == 100


def test_malformed_stored_profile_falls_back_to_floor(now):
    stored = SimpleNamespace(
        user_id="user-1",
        schema_version=1,
        top_combined_categories="{not json",
        top_interacted_users=[{"user_id": "ada"}],
    )

    snapshot = ProfileSnapshot.from_profile(stored)

    assert snapshot.categories == []
    assert snapshot.interacted_users == []
    assert snapshot.decode_errors == ["top_combined_categories", "top_interacted_users"]
    raw, _ = raw_score(snapshot, make_brief(categories=["AI"], author_id="ada", created_at=None), now=now)
    assert raw == 15


def test_stored_profile_accepts_json_strings():
    stored = SimpleNamespace(
        schema_version=1,
        top_combined_categories=json.dumps([{"category": "AI", "count": 3}]),
        top_interacted_users=[{"user_id": "ada", "name": "Ada", "interaction_count": 2}],
    )

    snapshot = ProfileSnapshot.from_profile(stored)

    assert snapshot.categories == [CategoryCount(category="AI", count=3)]
    assert snapshot.interacted_users[0].interaction_count == 2
    assert snapshot.decode_errors == []


def test_unknown_schema_version_is_ignored():
    stored = SimpleNamespace(
        schema_version=99,
        top_combined_categories=[{"category": "AI", "count": 3}],
        top_interacted_users=[],
    )
    snapshot = ProfileSnapshot.from_profile(stored)
    assert snapshot.categories == []
    assert "top_combined_categories" in snapshot.decode_errors


def test_missing_profile_is_empty():
    assert ProfileSnapshot.from_profile(None) == ProfileSnapshot.empty()


def test_rank_briefs_sorted_and_limited(profile, now):
    briefs = [
        make_brief(id="c-plain", categories=["Astronomy"], created_at=None),
        make_brief(id="a-match", categories=["AI"], created_at=None),
        make_brief(id="b-plain", categories=["Astronomy"], created_at=None),
    ]

    ranked = rank_briefs(profile, briefs, now=now)

    assert [s.brief_id for s in ranked] == ["a-match", "b-plain", "c-plain"]
    assert [s.brief_id for s in rank_briefs(profile, briefs, now=now, limit=2)] == ["a-match", "b-plain"]
    assert rank_briefs(profile, [], now=now) == []


def _stored_row(now, **overrides):
    row = dict(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        schema_version=1,
        created_at=now,
        updated_at=now,
        last_calculated=now,
        total_briefs_created=3,
        engagement_score=53.0,
        content_quality_score=80.0,
        top_created_categories=[{"category": "AI", "count": 3}],
        top_combined_categories=[{"category": "AI", "count": 6}],
        top_citation_domains=[{"domain": "nature.com", "count": 2}],
    )
    row.update(overrides)
    return SimpleNamespace(**row)


def test_corrupt_stored_row_reads_with_empty_lists(now):
    stored = _stored_row(
        now,
        top_combined_categories="{not json",
        top_interacted_users=[{"user_id": "ada"}],
    )

    read = decode_stored_profile(stored)

    assert read.top_combined_categories == []
    assert read.top_interacted_users == []
    assert read.top_created_categories == [CategoryCount(category="AI", count=3)]
    assert read.top_citation_domains[0].domain == "nature.com"
    assert read.total_briefs_created == 3
    assert read.engagement_score == 53.0
    assert read.top_created_title_words == []


def test_stored_row_with_unknown_version_reads_without_lists(now):
    read = decode_stored_profile(_stored_row(now, schema_version=99))

    assert read.schema_version == 99
    assert read.top_created_categories == []
    assert read.top_combined_categories == []
    assert read.top_citation_domains == []
    assert read.content_quality_score == 80.0


def test_decode_error_without_message_still_names_field():
    class SilentAdapter:
        def validate_python(self, raw):
            raise TypeError()

    with pytest.raises(ProfileDecodeError) as excinfo:
        decode_ranked_list([{"category": "AI"}], SilentAdapter(), "top_combined_categories")

    assert excinfo.value.field == "top_combined_categories"


def test_listing_entry_carries_owner_identity(now):
    owner = SimpleNamespace(id=uuid.uuid4(), name="Ada", email="ada@example.org")
    stored = _stored_row(now, user_id=owner.id, top_interacted_users="[]", user=owner)

    entry = RecommendationProfileWithUser(
        **decode_stored_profile(stored).model_dump(),
        user=UserSummary.model_validate(stored.user),
    )

    assert entry.user.email == "ada@example.org"
    assert entry.user_id == owner.id
    assert entry.top_combined_categories == [CategoryCount(category="AI", count=6)]
