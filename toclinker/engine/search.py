"""Fuzzy matching of titles against search provider results."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from .text import jaccard, normalize_title, title_tokens
from .types import PROVENANCE_SEARCH, Candidate, SearchResult

logger = logging.getLogger(__name__)

SearchFunction = Callable[[str], Sequence[Any]]


def similarity_score(a: str, b: str) -> float:
    """Token-set Jaccard similarity of two titles after normalisation."""

    return jaccard(title_tokens(a), title_tokens(b))


def _first_plain_text(rich_text: Any) -> Optional[str]:
    if isinstance(rich_text, list) and rich_text and isinstance(rich_text[0], Mapping):
        value = rich_text[0].get("plain_text")
        return value if isinstance(value, str) and value else None
    return None


def _notion_title(record: Mapping[str, Any]) -> Optional[str]:
    properties = record.get("properties")
    if isinstance(properties, Mapping):
        for name in ("title", "Name"):
            prop = properties.get(name)
            if isinstance(prop, Mapping):
                text = _first_plain_text(prop.get("title"))
                if text:
                    return text
    # Databases carry their title at the top level.
    return _first_plain_text(record.get("title"))


def extract_result(record: Any) -> Optional[SearchResult]:
    """Return the id and display text of ``record`` or ``None``.

    Accepts :class:`SearchResult` instances, plain mappings carrying ``id``
    with ``displayText`` or a string ``title``, and raw Notion search
    records. Only Notion page ids lose their dashes; plain ids are kept
    verbatim.
    """

    if isinstance(record, SearchResult):
        return record if record.id and record.display_text else None
    if not isinstance(record, Mapping):
        return None

    raw_id = record.get("id")
    if not isinstance(raw_id, str) or not raw_id:
        return None

    for key in ("displayText", "title"):
        display = record.get(key)
        if isinstance(display, str) and display:
            return SearchResult(id=raw_id, display_text=display)

    display = _notion_title(record)
    page_id = raw_id.replace("-", "")
    if not display or not page_id:
        return None
    return SearchResult(id=page_id, display_text=display)


def best_match(query: str, results: Any, *, min_score: float = 0.0) -> Optional[Candidate]:
    """Return the best scoring result for ``query`` as a candidate.

    Results are scanned in order and only a strictly higher score replaces
    the current best, so the first result wins ties. With the default
    ``min_score`` of 0 a result is returned even when no token overlaps.
    """

    if not isinstance(results, (list, tuple)):
        return None

    best: Optional[SearchResult] = None
    best_score = -1.0
    for record in results:
        result = extract_result(record)
        if result is None:
            continue
        score = similarity_score(query, result.display_text)
        if score < min_score:
            continue
        if score > best_score:
            best, best_score = result, score

    if best is None:
        return None
    logger.debug('Matched "%s" -> %s (%s, score %.3f)', query, best.id, best.display_text, best_score)
    return Candidate(
        href=best.id,
        key=normalize_title(best.display_text),
        provenance=PROVENANCE_SEARCH,
        score=best_score,
    )


class SearchLookup:
    """Title lookup that runs one search query per title."""

    def __init__(self, run_search: SearchFunction, *, min_score: float = 0.0) -> None:
        self.run_search = run_search
        self.min_score = min_score

    def find(self, title: str) -> Optional[Candidate]:
        try:
            results = self.run_search(title)
        except Exception as exc:
            logger.warning('Search for "%s" failed: %s', title, exc)
            return None
        return best_match(title, results, min_score=self.min_score)
