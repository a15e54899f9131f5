"""Interaction graph and citation domains — who a user reads, and what a user cites."""

import logging
from collections import Counter
from typing import Iterable
from urllib.parse import urlsplit

from briefrec.schemas.profile import InteractedUser, DomainCount
from briefrec.services.activity import BriefRecord

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown"


def rank_interacted_authors(
    user_id: str,
    reviewed: Iterable[BriefRecord],
    upvoted: Iterable[BriefRecord],
) -> list[InteractedUser]:
    """Rank other authors by how many of their briefs the user reviewed or upvoted.

    Every review and every upvote counts once. The user's own briefs are
    never counted, so the result cannot contain ``user_id``.
    """
    counts: Counter = Counter()
    names: dict[str, str] = {}

    for brief in (*reviewed, *upvoted):
        author_id = str(brief.author_id)
        if author_id == str(user_id):
            continue
        counts[author_id] += 1
        names.setdefault(author_id, brief.author_name or UNKNOWN_AUTHOR)

    ranked = sorted(counts.items(), key=lambda item: (-item[1], names[item[0]], item[0]))
    return [
        InteractedUser(user_id=author_id, name=names[author_id], interaction_count=count)
        for author_id, count in ranked
    ]


def extract_domain(url: str) -> str | None:
    """Return the host of ``url`` without a leading ``www.``, or None if malformed."""
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except (ValueError, AttributeError):
        return None
    if not parts.scheme or not host:
        return None
    if host.startswith("www."):
        host = host[4:]
    return host or None


def rank_citation_domains(urls: Iterable[str]) -> list[DomainCount]:
    """Count citation domains, most cited first. Malformed URLs are skipped."""
    counts: Counter = Counter()
    for url in urls:
        domain = extract_domain(url) if url else None
        if domain is None:
            logger.debug("Skipping malformed citation URL %r", url)
            continue
        counts[domain] += 1

    return [
        DomainCount(domain=domain, count=count)
        for domain, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]
