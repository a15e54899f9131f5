"""Frequency aggregation — ranked category and title-word counts for profiles."""

import re
from collections import Counter
from typing import Final, Iterable

from briefrec.schemas.profile import CategoryCount, WordCount

# Created content says more about a user's taste than content they consumed
CREATED_WEIGHT: Final[int] = 2
INTERACTED_WEIGHT: Final[int] = 1

MIN_WORD_LENGTH: Final[int] = 3

# Common English words excluded from title analysis
STOP_WORDS: Final[frozenset[str]] = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "will", "with", "this", "these", "those", "what",
    "when", "where", "which", "who", "why", "how", "can", "could",
    "would", "should", "may", "might", "must", "shall", "do", "does",
    "did", "have", "had", "been", "into", "about", "their", "our",
})

_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def _ranked(counts: Counter) -> list[tuple[str, int]]:
    """Sort by count descending, then key ascending so ties are reproducible."""
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def tokenize_title(title: str) -> list[str]:
    """Lowercase, strip punctuation and drop short or stop-listed tokens."""
    words = _PUNCTUATION_RE.sub("", title.lower()).split()
    return [w for w in words if len(w) >= MIN_WORD_LENGTH and w not in STOP_WORDS]


def aggregate_categories(names: Iterable[str]) -> list[CategoryCount]:
    """Count category names, most frequent first."""
    counts = Counter(name for name in names if name)
    return [CategoryCount(category=name, count=count) for name, count in _ranked(counts)]


def aggregate_title_words(titles: Iterable[str]) -> list[WordCount]:
    """Count meaningful words across titles, most frequent first."""
    counts: Counter = Counter()
    for title in titles:
        if title:
            counts.update(tokenize_title(title))
    return [WordCount(word=word, count=count) for word, count in _ranked(counts)]


def _weighted_merge(
    created: Iterable[tuple[str, int]],
    interacted: Iterable[tuple[str, int]],
) -> list[tuple[str, int]]:
    combined: Counter = Counter()
    for key, count in created:
        combined[key] += count * CREATED_WEIGHT
    for key, count in interacted:
        combined[key] += count * INTERACTED_WEIGHT
    return _ranked(combined)


def combine_categories(
    created: list[CategoryCount],
    interacted: list[CategoryCount],
) -> list[CategoryCount]:
    """Merge created and interacted category counts (created weighted x2)."""
    merged = _weighted_merge(
        ((c.category, c.count) for c in created),
        ((c.category, c.count) for c in interacted),
    )
    return [CategoryCount(category=name, count=count) for name, count in merged]


def combine_title_words(
    created: list[WordCount],
    interacted: list[WordCount],
) -> list[WordCount]:
    """Merge created and interacted title-word counts (created weighted x2)."""
    merged = _weighted_merge(
        ((w.word, w.count) for w in created),
        ((w.word, w.count) for w in interacted),
    )
    return [WordCount(word=word, count=count) for word, count in merged]
