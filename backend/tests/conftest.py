"""Shared fixtures: in-memory fakes of the data-access seams."""

from datetime import datetime, timezone

import pytest

from briefrec.services.activity import ActivitySource, ProfileStore, BriefRecord, UserActivity
from briefrec.services.progress import InMemoryProgressStore

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def make_brief(id="brief-1", title="Untitled brief", author_id="author-1", **kwargs) -> BriefRecord:
    kwargs.setdefault("created_at", NOW)
    return BriefRecord(id=id, title=title, author_id=author_id, **kwargs)


class FakeActivitySource(ActivitySource):
    def __init__(self, activities=None, broken=()):
        self.activities = {a.user_id: a for a in (activities or [])}
        self.broken = set(broken)

    def load_user_activity(self, user_id):
        if user_id in self.broken:
            raise RuntimeError("database unavailable")
        return self.activities.get(user_id)

    def list_user_ids(self):
        return [*self.activities, *self.broken]


class FakeProfileStore(ProfileStore):
    def __init__(self):
        self.profiles = {}
        self.writes = 0

    def upsert_profile(self, user_id, data):
        self.profiles[user_id] = data
        self.writes += 1
        return data


class RecordingProgressStore(InMemoryProgressStore):
    """Keeps every value each key held, in order."""

    def __init__(self):
        super().__init__()
        self.history = {}

    def _record(self, key):
        self.history.setdefault(key, []).append(self.peek(key))

    def start(self, key):
        super().start(key)
        self._record(key)

    def advance(self, key, percent):
        super().advance(key, percent)
        self._record(key)

    def fail(self, key):
        super().fail(key)
        self._record(key)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def progress_store():
    return RecordingProgressStore()


@pytest.fixture
def profile_store():
    return FakeProfileStore()


@pytest.fixture
def empty_activity():
    return UserActivity(user_id="user-1")
