"""Interaction graph and citation domain tests."""

import pytest

from briefrec.schemas.profile import DomainCount, InteractedUser
from briefrec.services.interaction_graph import extract_domain, rank_citation_domains, rank_interacted_authors

from conftest import make_brief


def test_authors_ranked_by_reviews_plus_upvotes():
    reviewed = [
        make_brief(id="b1", author_id="ada", author_name="Ada"),
        make_brief(id="b2", author_id="grace", author_name="Grace"),
    ]
    upvoted = [
        make_brief(id="b1", author_id="ada", author_name="Ada"),
        make_brief(id="b3", author_id="ada", author_name="Ada"),
    ]

    result = rank_interacted_authors("me", reviewed, upvoted)

    assert result == [
        InteractedUser(user_id="ada", name="Ada", interaction_count=3),
        InteractedUser(user_id="grace", name="Grace", interaction_count=1),
    ]


def test_own_briefs_are_excluded():
    reviewed = [make_brief(author_id="me"), make_brief(author_id="other")]
    upvoted = [make_brief(author_id="me")]

    result = rank_interacted_authors("me", reviewed, upvoted)

    assert [u.user_id for u in result] == ["other"]


def test_missing_author_name_falls_back_to_unknown():
    result = rank_interacted_authors("me", [make_brief(author_id="anon", author_name=None)], [])
    assert result[0].name == "Unknown"


def test_no_interactions_gives_empty_list():
    assert rank_interacted_authors("me", [], []) == []


def test_citation_domains_skip_malformed_urls():
    result = rank_citation_domains(["https://www.nature.com/x", "not-a-url"])
    assert result == [DomainCount(domain="nature.com", count=1)]


def test_citation_domains_counted_and_sorted():
    urls = [
        "https://arxiv.org/abs/1",
        "https://www.arxiv.org/abs/2",
        "http://pubmed.ncbi.nlm.nih.gov/3",
        "https://arxiv.org/pdf/4",
    ]
    result = rank_citation_domains(urls)
    assert result == [
        DomainCount(domain="arxiv.org", count=3),
        DomainCount(domain="pubmed.ncbi.nlm.nih.gov", count=1),
    ]


@pytest.mark.parametrize("url", ["", "   ", "http://", "www.example.com/page", "https://[::1"])
def test_malformed_urls_have_no_domain(url):
    assert extract_domain(url) is None


def test_only_leading_www_is_stripped():
    assert extract_domain("https://www.wwwlab.org/") == "wwwlab.org"
