"""Interaction history value objects and the data-access seams the profile builder reads through."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from briefrec.schemas.profile import ProfileData


@dataclass
class BriefRecord:
    """A brief as seen by the recommendation core (read-only snapshot)."""

    id: str
    title: str
    author_id: str
    author_name: str | None = None
    categories: list[str] = field(default_factory=list)
    citation_urls: list[str] = field(default_factory=list)
    ratings: list[int] = field(default_factory=list)
    upvote_count: int = 0
    view_count: int = 0
    created_at: datetime | None = None


@dataclass
class UserActivity:
    """Everything a user authored or engaged with, each entry carrying the referenced brief."""

    user_id: str
    authored: list[BriefRecord] = field(default_factory=list)
    reviewed: list[BriefRecord] = field(default_factory=list)
    upvoted: list[BriefRecord] = field(default_factory=list)
    saved: list[BriefRecord] = field(default_factory=list)
    viewed: list[BriefRecord] = field(default_factory=list)

    @property
    def interacted(self) -> list[BriefRecord]:
        """Union of all consumed briefs (reviews + upvotes + saves + views), duplicates kept."""
        return [*self.reviewed, *self.upvoted, *self.saved, *self.viewed]


class ActivitySource(ABC):
    """Read-only access to interaction history."""

    @abstractmethod
    def load_user_activity(self, user_id: str) -> UserActivity | None:
        """Return the user's activity, or None if the user does not exist."""
        ...

    @abstractmethod
    def list_user_ids(self) -> list[str]:
        """Return the ids of every user eligible for a profile."""
        ...


class ProfileStore(ABC):
    """Write access to the one-profile-per-user table."""

    @abstractmethod
    def upsert_profile(self, user_id: str, data: ProfileData) -> Any:
        """Create or fully replace the user's stored profile and return it."""
        ...
