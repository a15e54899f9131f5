"""Pydantic schemas for scores, recalculation results and progress readings."""

from pydantic import BaseModel, Field


class RecommendationScore(BaseModel):
    """Relevance of one brief for one user. Computed on demand, never stored."""

    brief_id: str
    score: float = Field(ge=15, le=100)
    reasons: list[str] = []


class BulkRecalcResult(BaseModel):
    """Outcome tally of a recalculate-all run."""

    total: int = 0
    successful: int = 0
    failed: int = 0
    failures: dict[str, str] = {}


class ProgressReading(BaseModel):
    """Percent-complete of one user's recalculation."""

    user_id: str
    percent: int
    failed: bool = False
    done: bool = False


class RecalcDispatch(BaseModel):
    """Response for a queued recalculation."""

    task_id: str
    user_id: str | None = None
    status: str = "queued"
