"""Shared text utilities for the resolution engine."""

from __future__ import annotations

import re
from typing import Any, Iterable, Set

_DISALLOWED_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_title(title: Any) -> str:
    """Return the lookup key for ``title``.

    The key is lowercase ASCII letters, digits and single spaces. ``None``
    and anything that is not a string normalise to the empty string.
    """

    if not isinstance(title, str):
        return ""
    stripped = _DISALLOWED_RE.sub("", title.lower())
    return _WHITESPACE_RE.sub(" ", stripped).strip()


def collapse_whitespace(text: str) -> str:
    """Collapse internal whitespace but preserve the original casing."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def title_tokens(title: Any) -> Set[str]:
    """Return the set of non-empty tokens of the normalised title."""

    return {token for token in normalize_title(title).split(" ") if token}


def jaccard(set_a: Iterable[str], set_b: Iterable[str]) -> float:
    """Return Jaccard similarity for two iterables, 0.0 if either is empty."""

    set_a = set(set_a)
    set_b = set(set_b)
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)
