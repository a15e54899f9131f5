"""Recalculation progress — per-user percent-complete shared between workers and pollers.

Each running pipeline writes only its own key through a ProgressHandle.
Values only move forward until the pipeline ends at 100 (done) or FAILED.
A terminal value stays readable until a poller has read it once; the
read removes it.
"""

import logging
import threading
from abc import ABC, abstractmethod
from functools import lru_cache

import redis

from briefrec.config import get_settings
from briefrec.schemas.scoring import ProgressReading

logger = logging.getLogger(__name__)

COMPLETE = 100
FAILED = -1


def is_terminal(value: int) -> bool:
    return value >= COMPLETE or value == FAILED


def to_reading(user_id: str, value: int) -> ProgressReading:
    return ProgressReading(
        user_id=user_id,
        percent=max(0, value),
        failed=value == FAILED,
        done=value >= COMPLETE,
    )


class ProgressStore(ABC):
    """Concurrent key-value store of recalculation progress, keyed by user id."""

    @abstractmethod
    def start(self, key: str) -> None:
        """Reset ``key`` to 0 for a new run."""
        ...

    @abstractmethod
    def advance(self, key: str, percent: int) -> None:
        """Raise ``key`` to ``percent``; lower values and writes after a failure are ignored."""
        ...

    @abstractmethod
    def fail(self, key: str) -> None:
        ...

    @abstractmethod
    def peek(self, key: str) -> int | None:
        """Read without acknowledging."""
        ...

    @abstractmethod
    def poll(self, key: str) -> int | None:
        """Read, removing the entry if the value read is terminal."""
        ...

    @abstractmethod
    def keys(self) -> list[str]:
        ...

    def poll_all(self) -> dict[str, int]:
        readings = {}
        for key in self.keys():
            value = self.poll(key)
            if value is not None:
                readings[key] = value
        return readings


class InMemoryProgressStore(ProgressStore):
    """Process-local store, for a single worker process and for tests."""

    def __init__(self):
        self._values: dict[str, int] = {}
        self._lock = threading.Lock()

    def start(self, key: str) -> None:
        with self._lock:
            self._values[key] = 0

    def advance(self, key: str, percent: int) -> None:
        percent = max(0, min(COMPLETE, int(percent)))
        with self._lock:
            current = self._values.get(key)
            if current is not None and (current == FAILED or current >= percent):
                return
            self._values[key] = percent

    def fail(self, key: str) -> None:
        with self._lock:
            self._values[key] = FAILED

    def peek(self, key: str) -> int | None:
        with self._lock:
            return self._values.get(key)

    def poll(self, key: str) -> int | None:
        with self._lock:
            value = self._values.get(key)
            if value is not None and is_terminal(value):
                del self._values[key]
            return value

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._values)


# KEYS[1] = progress key; ARGV[1] = percent; ARGV[2] = ttl seconds
_ADVANCE_SCRIPT = """
local current = redis.call('GET', KEYS[1])
if current then
    local value = tonumber(current)
    if value < 0 or value >= tonumber(ARGV[1]) then
        return 0
    end
end
redis.call('SET', KEYS[1], ARGV[1], 'EX', ARGV[2])
return 1
"""

# KEYS[1] = progress key; ARGV[1] = complete value
_POLL_SCRIPT = """
local current = redis.call('GET', KEYS[1])
if not current then
    return false
end
local value = tonumber(current)
if value < 0 or value >= tonumber(ARGV[1]) then
    redis.call('DEL', KEYS[1])
end
return current
"""


class RedisProgressStore(ProgressStore):
    """Store shared by API processes and Celery workers.

    The TTL only guards against entries orphaned by a crashed worker;
    normal cleanup happens when a poller reads a terminal value.
    """

    def __init__(self, client: redis.Redis, prefix: str = "recalc_progress", ttl_seconds: int = 3600):
        self.client = client
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds
        self._advance = client.register_script(_ADVANCE_SCRIPT)
        self._poll = client.register_script(_POLL_SCRIPT)

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def start(self, key: str) -> None:
        self.client.set(self._key(key), 0, ex=self.ttl_seconds)

    def advance(self, key: str, percent: int) -> None:
        percent = max(0, min(COMPLETE, int(percent)))
        self._advance(keys=[self._key(key)], args=[percent, self.ttl_seconds])

    def fail(self, key: str) -> None:
        self.client.set(self._key(key), FAILED, ex=self.ttl_seconds)

    def peek(self, key: str) -> int | None:
        value = self.client.get(self._key(key))
        return int(value) if value is not None else None

    def poll(self, key: str) -> int | None:
        value = self._poll(keys=[self._key(key)], args=[COMPLETE])
        return int(value) if value is not None else None

    def keys(self) -> list[str]:
        start = len(self.prefix) + 1
        return [
            _decode(raw)[start:]
            for raw in self.client.scan_iter(match=f"{self.prefix}:*")
        ]


def _decode(raw) -> str:
    return raw.decode() if isinstance(raw, bytes) else raw


class ProgressHandle:
    """The progress channel handed to one user's recalculation pipeline."""

    def __init__(self, store: ProgressStore, user_id: str):
        self.store = store
        self.user_id = str(user_id)

    def start(self) -> None:
        self.store.start(self.user_id)

    def report(self, percent: int) -> None:
        self.store.advance(self.user_id, percent)

    def fail(self) -> None:
        self.store.fail(self.user_id)


@lru_cache
def get_progress_store() -> ProgressStore:
    settings = get_settings()
    client = redis.from_url(settings.redis_url, socket_timeout=5)
    return RedisProgressStore(
        client,
        prefix=settings.progress_key_prefix,
        ttl_seconds=settings.progress_ttl_seconds,
    )
