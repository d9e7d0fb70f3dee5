"""Title normalisation and similarity tests."""

from __future__ import annotations

import pytest

from toclinker.engine.search import similarity_score
from toclinker.engine.text import jaccard, normalize_title, title_tokens


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Getting Started!", "getting started"),
        ("  Mixed   CASE\tTitle\n", "mixed case title"),
        ("a - b", "a b"),
        ("Café & Crème", "caf crme"),
        ("2024: Q1 / Q2 plans", "2024 q1 q2 plans"),
        ("!!!", ""),
        ("", ""),
    ],
)
def test_normalize_title(title, expected):
    assert normalize_title(title) == expected


@pytest.mark.parametrize("value", [None, 42, 3.5, ["a"], {"a": 1}])
def test_normalize_title_treats_non_strings_as_empty(value):
    assert normalize_title(value) == ""


@pytest.mark.parametrize(
    "title",
    ["Getting Started!", "a - b", "  x\t\ty  ", "Ünïcode — dashes – everywhere", "!!!", "Roadmap (2025)"],
)
def test_normalize_title_is_idempotent(title):
    once = normalize_title(title)
    assert normalize_title(once) == once


def test_title_tokens_are_a_set_of_non_empty_words():
    assert title_tokens("Team  Wiki - Team Notes") == {"team", "wiki", "notes"}
    assert title_tokens("???") == set()


def test_jaccard_bounds():
    assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
    assert jaccard({"a"}, {"a"}) == 1.0
    assert jaccard({"a"}, {"b"}) == 0.0
    assert jaccard(set(), {"a"}) == 0.0
    assert jaccard(set(), set()) == 0.0


@pytest.mark.parametrize(
    ("query", "text"),
    [
        ("Getting Started", "Getting started!"),
        ("Project Roadmap", "Roadmap"),
        ("Meeting notes 2024", "Notes from the meeting"),
        ("Alpha", "Beta"),
        ("", "Anything"),
        ("...", "..."),
    ],
)
def test_similarity_score_is_bounded(query, text):
    assert 0.0 <= similarity_score(query, text) <= 1.0


def test_similarity_score_extremes():
    assert similarity_score("Getting Started", "getting   started!") == 1.0
    assert similarity_score("Alpha Beta", "Gamma Delta") == 0.0
    assert similarity_score("", "Gamma") == 0.0
    assert similarity_score("Project Roadmap", "Roadmap") == pytest.approx(0.5)
