"""Derived profile metrics — engagement and content quality, both on a 0-100 scale."""

import math
from typing import Iterable, Sequence

MAX_SCORE = 100.0

# Points per activity for the engagement score
ENGAGEMENT_WEIGHTS = {
    "briefs_created": 10,
    "reviews_given": 5,
    "upvotes_given": 2,
    "saves": 3,
}

# Ratings are 1-5; x20 maps a mean rating onto 0-100
RATING_SCALE = 20


def _clamp(value: float, low: float = 0.0, high: float = MAX_SCORE) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def engagement_score(briefs_created: int, reviews_given: int, upvotes_given: int, saves: int) -> float:
    """Weighted activity total, capped at 100 and rounded to one decimal."""
    raw = (
        briefs_created * ENGAGEMENT_WEIGHTS["briefs_created"]
        + reviews_given * ENGAGEMENT_WEIGHTS["reviews_given"]
        + upvotes_given * ENGAGEMENT_WEIGHTS["upvotes_given"]
        + saves * ENGAGEMENT_WEIGHTS["saves"]
    )
    return round(_clamp(raw), 1)


def content_quality_score(ratings_per_brief: Iterable[Sequence[int]]) -> float:
    """Average of per-brief mean ratings, scaled to 0-100.

    Briefs without reviews are left out entirely; with no reviewed brief at
    all the score is 0.
    """
    brief_means = [sum(ratings) / len(ratings) for ratings in ratings_per_brief if ratings]
    if not brief_means:
        return 0.0
    mean_of_means = sum(brief_means) / len(brief_means)
    return float(_clamp(_round_half_up(mean_of_means * RATING_SCALE)))
