"""Tests for query evaluation, scoring and ranking."""

import pytest

from specatlas.search import (
    SearchOptions,
    evaluate,
    find_content_snippet,
    matches_query,
    parse_query,
    search,
)
from specatlas.search.ranker import TIER_EXACT, TIER_FUZZY
from tests.spec_helpers import make_spec


def _ids(response):
    return [r.id for r in response.results]


@pytest.fixture
def cache_corpus():
    return [
        make_spec("010-notes", title="Misc", content="cache cache"),
        make_spec("002-cache", title="Cache layer", status="planned"),
        make_spec("005-other", title="Other", tags=["cache"]),
        make_spec("003-cashe", title="Cashe"),
    ]


class TestMatching:
    """Tests for which specs a query selects."""

    def test_status_filter_returns_exactly_planned(self, corpus):
        response = search(corpus, "status:planned")
        assert _ids(response) == ["003-alpha-release", "004-alpha-docs"]

    def test_cross_field_and(self, corpus):
        # alpha in the id, beta in the title
        assert _ids(search(corpus, "alpha beta")) == ["003-alpha-release"]

    def test_id_words_match(self, corpus):
        assert _ids(search(corpus, "user auth")) == ["001-user-auth"]

    def test_case_insensitive(self, corpus):
        assert _ids(search(corpus, "AUTHENTICATION")) == ["001-user-auth"]

    def test_or(self, corpus):
        assert set(_ids(search(corpus, "docs OR release"))) == {
            "003-alpha-release",
            "004-alpha-docs",
        }

    def test_and_binds_tighter_than_or(self, corpus):
        response = search(corpus, "alpha beta OR index")
        assert set(_ids(response)) == {"002-search-index", "003-alpha-release"}

    def test_not(self, corpus):
        assert _ids(search(corpus, "alpha NOT docs")) == ["003-alpha-release"]

    def test_phrase(self, corpus):
        assert _ids(search(corpus, '"inverted index"')) == ["002-search-index"]
        assert _ids(search(corpus, '"index inverted"')) == []

    def test_tag_and_priority_fields(self, corpus):
        assert _ids(search(corpus, "tag:api priority:high")) == ["001-user-auth"]

    def test_created_window(self, corpus):
        assert _ids(search(corpus, "created:>=2025-06")) == [
            "002-search-index",
            "003-alpha-release",
        ]

    def test_created_never_matches_missing_date(self, corpus):
        assert "004-alpha-docs" not in _ids(search(corpus, "created:<2030"))

    def test_unknown_field_is_free_text(self):
        specs = [make_spec("001-x", content="see foo:bar for details"), make_spec("002-y")]
        assert _ids(search(specs, "foo:bar")) == ["001-x"]

    def test_invalid_query_matches_nothing(self, corpus):
        response = search(corpus, '"unterminated')
        assert response.total == 0
        assert response.results == ()

    def test_non_ascii_fuzzy_threshold_matches_nothing(self, corpus):
        assert search(corpus, "auth~²").total == 0

    def test_oversized_date_filter_matches_nothing(self):
        specs = [make_spec("001-x", created="2025-01-01")]
        assert search(specs, "created:" + "1" * 5000).total == 0
        assert search(specs, "created:>=" + "9" * 25).total == 0

    def test_matches_query_helper(self, corpus):
        assert matches_query(corpus[0], parse_query("security"))
        assert not matches_query(corpus[0], parse_query("billing"))


class TestScoring:
    """Tests for relevance weights."""

    def test_word_weights(self, corpus):
        match = evaluate(corpus[1], parse_query("search"))
        # title 10 + whole word 5, id 8, tag 6 + exact 3, content 1
        assert match.score == 33

    def test_title_bonus_for_multiple_terms(self, cache_corpus):
        match = evaluate(cache_corpus[1], parse_query("cache layer"))
        # cache: title 15 + id 8; layer: title 15; two title terms: +4
        assert match.score == 42

    def test_phrase_weight(self, cache_corpus):
        assert evaluate(cache_corpus[1], parse_query('"cache layer"')).score == 14

    def test_content_hits_capped(self):
        spec = make_spec("001-x", title="X", content="word " * 20)
        assert evaluate(spec, parse_query("word")).score == 5

    def test_field_only_query(self, cache_corpus):
        assert evaluate(cache_corpus[1], parse_query("status:planned")).score == 2

    def test_field_and_text(self, cache_corpus):
        assert evaluate(cache_corpus[1], parse_query("status:planned cache")).score == 25

    def test_fuzzy_weight(self, cache_corpus):
        match = evaluate(cache_corpus[3], parse_query("cache~1"))
        assert match.score == 7
        assert match.fuzzy_only
        assert match.total_distance == 1

    def test_evidence_fields(self, corpus):
        match = evaluate(corpus[2], parse_query("alpha beta"))
        fields = {e.term: e.fields for e in match.evidence}
        assert fields == {"alpha": ("id",), "beta": ("title",)}


class TestRanking:
    """Tests for result ordering and truncation."""

    def test_descending_score(self, cache_corpus):
        response = search(cache_corpus, "cache")
        assert _ids(response) == ["002-cache", "005-other", "010-notes"]
        scores = [r.score for r in response.results]
        assert scores == sorted(scores, reverse=True)

    def test_exact_tier_before_fuzzy(self, cache_corpus):
        response = search(cache_corpus, "cache~1")
        assert _ids(response) == ["002-cache", "005-other", "010-notes", "003-cashe"]
        assert response.results[-1].tier == TIER_FUZZY
        assert all(r.tier == TIER_EXACT for r in response.results[:-1])

    def test_fuzzy_ordered_by_distance(self):
        specs = [
            make_spec("021-y", title="Kashe"),
            make_spec("020-x", title="Unrelated", tags=["cashe"]),
        ]
        response = search(specs, "cache~2")
        assert _ids(response) == ["020-x", "021-y"]
        assert [r.total_distance for r in response.results] == [1, 2]

    def test_ties_by_number_then_unnumbered_last(self):
        specs = [
            make_spec("draft", title="Widget"),
            make_spec("010-b", title="Widget"),
            make_spec("002-a", title="Widget"),
        ]
        assert _ids(search(specs, "widget")) == ["002-a", "010-b", "draft"]

    def test_plain_fuzzy_off_by_default(self, cache_corpus):
        assert "003-cashe" not in _ids(search(cache_corpus, "cache"))

    def test_fuzzy_distance_option(self, cache_corpus):
        response = search(cache_corpus, "cache", SearchOptions(fuzzy_distance=1))
        assert _ids(response)[-1] == "003-cashe"


class TestLimits:
    """Tests for limit and min_score."""

    def test_limit_keeps_total(self, cache_corpus):
        response = search(cache_corpus, "cache", SearchOptions(limit=2))
        assert response.total == 3
        assert response.returned == 2
        assert _ids(response) == ["002-cache", "005-other"]

    def test_limit_zero(self, cache_corpus):
        response = search(cache_corpus, "cache", SearchOptions(limit=0))
        assert response.total == 3
        assert response.results == ()

    def test_negative_limit_raises(self, cache_corpus):
        with pytest.raises(ValueError):
            search(cache_corpus, "cache", SearchOptions(limit=-1))

    def test_min_score_drops_before_counting(self, cache_corpus):
        response = search(cache_corpus, "cache", SearchOptions(min_score=5))
        assert response.total == 2
        assert "010-notes" not in _ids(response)


class TestContentSnippet:
    def test_first_matching_line(self):
        content = "Intro\n  The cache stores data.\nMore cache"
        assert find_content_snippet(content, ["CACHE"]) == "The cache stores data."

    def test_long_line_trimmed_around_hit(self):
        line = "x" * 120 + " cache " + "y" * 30
        snippet = find_content_snippet(line, ["cache"], max_len=100)
        assert snippet.startswith("...")
        assert "cache" in snippet

    def test_no_hit(self):
        assert find_content_snippet("nothing here", ["cache"]) is None
        assert find_content_snippet("cache", []) is None
