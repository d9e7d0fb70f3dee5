"""Search result matching tests."""

from __future__ import annotations

import pytest

from toclinker.engine.search import SearchLookup, best_match, extract_result
from toclinker.engine.types import PROVENANCE_SEARCH, SearchResult

from .conftest import notion_page


@pytest.mark.parametrize(
    ("record", "expected"),
    [
        (notion_page("aaaa-bbbb", "Roadmap"), SearchResult(id="aaaabbbb", display_text="Roadmap")),
        (notion_page("cc-dd", "Tasks", prop="Name"), SearchResult(id="ccdd", display_text="Tasks")),
        (
            {"object": "database", "id": "ee-ff", "title": [{"plain_text": "Projects DB"}]},
            SearchResult(id="eeff", display_text="Projects DB"),
        ),
        ({"id": "plain", "displayText": "Plain"}, SearchResult(id="plain", display_text="Plain")),
        ({"id": "page-1", "displayText": "Alpha"}, SearchResult(id="page-1", display_text="Alpha")),
        ({"id": "abc", "title": "Alpha"}, SearchResult(id="abc", display_text="Alpha")),
    ],
)
def test_extract_result_variants(record, expected):
    assert extract_result(record) == expected


def test_extract_result_passes_search_results_through():
    result = SearchResult(id="x", display_text="X")
    assert extract_result(result) is result


def test_plain_ids_match_search_result_ids():
    record = {"id": "page-1", "displayText": "Alpha"}

    from_mapping = best_match("Alpha", [record])
    from_result = best_match("Alpha", [SearchResult(id="page-1", display_text="Alpha")])

    assert from_mapping is not None and from_result is not None
    assert from_mapping.href == from_result.href == "page-1"


@pytest.mark.parametrize(
    "record",
    [
        None,
        "page",
        {"id": "no-title"},
        {"properties": {"title": {"title": [{"plain_text": "No id"}]}}},
        {"id": "empty", "properties": {"title": {"title": []}}},
        {"id": "---", "properties": {"title": {"title": [{"plain_text": "Only dashes"}]}}},
        {"id": "", "displayText": "Empty id"},
        SearchResult(id="", display_text="Missing id"),
    ],
)
def test_extract_result_rejects_incomplete_records(record):
    assert extract_result(record) is None


def test_best_match_picks_highest_score():
    results = [
        notion_page("1111", "Team meeting notes"),
        notion_page("2222", "Project Roadmap"),
        notion_page("3333", "Roadmap"),
    ]

    candidate = best_match("Project Roadmap!", results)

    assert candidate is not None
    assert candidate.href == "2222"
    assert candidate.key == "project roadmap"
    assert candidate.provenance == PROVENANCE_SEARCH
    assert candidate.score == 1.0


def test_best_match_first_seen_wins_ties():
    results = [
        notion_page("1111", "Roadmap Q1"),
        notion_page("2222", "Roadmap Q2"),
    ]

    assert best_match("Roadmap", results).href == "1111"


def test_best_match_returns_zero_score_match_by_default():
    results = [notion_page("1111", "Alpha"), notion_page("2222", "Beta")]

    candidate = best_match("Zzzqqqxyz", results)

    assert candidate is not None
    assert candidate.href == "1111"
    assert candidate.score == 0.0


def test_best_match_threshold_excludes_weak_results():
    results = [notion_page("1111", "Alpha"), notion_page("2222", "Roadmap Q2 planning")]

    assert best_match("Zzzqqqxyz", results, min_score=0.01) is None
    assert best_match("Roadmap", results, min_score=0.5) is None
    assert best_match("Roadmap", results, min_score=0.25).href == "2222"


@pytest.mark.parametrize("results", [[], None, {"results": []}, "oops", [None, {"id": "x"}]])
def test_best_match_without_usable_results(results):
    assert best_match("Roadmap", results) is None


def test_search_lookup_runs_one_query_per_title():
    queries = []

    def run_search(query):
        queries.append(query)
        return [notion_page("abcd-ef", query)]

    lookup = SearchLookup(run_search)

    assert lookup.find("FAQ").href == "abcdef"
    assert lookup.find("Roadmap").href == "abcdef"
    assert queries == ["FAQ", "Roadmap"]


def test_search_lookup_swallows_upstream_failures(caplog):
    def run_search(query):
        raise TimeoutError("upstream timed out")

    lookup = SearchLookup(run_search)

    with caplog.at_level("WARNING", logger="toclinker.engine.search"):
        assert lookup.find("FAQ") is None
    assert "upstream timed out" in caplog.text
