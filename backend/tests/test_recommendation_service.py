"""Recommendation service tests against a scripted async session."""

import asyncio
import uuid
from types import SimpleNamespace

from briefrec.services.recommendation_service import (
    calculate_all_recommendation_scores,
    calculate_recommendation_score,
    get_personalized_recommendations,
)


class ScriptedResult:
    def __init__(self, rows):
        self.rows = rows

    def scalar_one_or_none(self):
        return self.rows[0] if self.rows else None

    def scalars(self):
        return self

    def all(self):
        return list(self.rows)


class ScriptedSession:
    """Stands in for AsyncSession; each execute() returns the next scripted row list."""

    def __init__(self, *results):
        self.results = list(results)
        self.executed = 0

    async def execute(self, statement):
        self.executed += 1
        return ScriptedResult(self.results.pop(0))


def brief_row(views=0, upvotes=0, categories=(), brief_id=None):
    return SimpleNamespace(
        id=brief_id or uuid.uuid4(),
        title="Brief",
        author_id=uuid.uuid4(),
        author=SimpleNamespace(name="Ada"),
        categories=[SimpleNamespace(name=c) for c in categories],
        view_count=views,
        created_at=None,
        reviews=[],
        upvotes=[object()] * upvotes,
    )


def stored_profile(categories):
    return SimpleNamespace(
        user_id=uuid.uuid4(),
        schema_version=1,
        top_combined_categories=[{"category": c, "count": n} for c, n in categories],
        top_interacted_users=[],
    )


def test_unresolvable_brief_yields_no_score():
    db = ScriptedSession([])

    score = asyncio.run(calculate_recommendation_score(db, uuid.uuid4(), uuid.uuid4()))

    assert score is None
    assert db.executed == 1


def test_single_brief_scored_against_stored_profile():
    row = brief_row(categories=["AI"])
    db = ScriptedSession([row], [stored_profile([("AI", 4)])])

    score = asyncio.run(calculate_recommendation_score(db, uuid.uuid4(), row.id))

    assert score.brief_id == str(row.id)
    assert score.reasons[0].startswith("Strong category match: AI")


def test_user_without_profile_gets_floor_scores():
    db = ScriptedSession([], [brief_row(categories=["AI"])])

    scores = asyncio.run(calculate_all_recommendation_scores(db, uuid.uuid4()))

    assert len(scores) == 1
    assert scores[0].reasons == ["General content recommendation"]


def test_all_scores_best_first():
    # raw 15 vs 30: both sides of the low-score lift
    quiet, popular = brief_row(), brief_row(views=1000, upvotes=5)
    db = ScriptedSession([None], [quiet, popular])

    scores = asyncio.run(calculate_all_recommendation_scores(db, uuid.uuid4()))

    assert [s.brief_id for s in scores] == [str(popular.id), str(quiet.id)]
    assert scores[0].score > scores[1].score


def test_personalized_respects_limit():
    rows = [
        brief_row(categories=["AI"]),
        brief_row(categories=["AI"], views=900),
        brief_row(categories=["Astronomy"]),
    ]
    db = ScriptedSession([stored_profile([("AI", 1)])], rows)

    top = asyncio.run(get_personalized_recommendations(db, uuid.uuid4(), limit=2))

    assert [s.brief_id for s in top] == [str(rows[1].id), str(rows[0].id)]
