"""Typed data structures used by the resolution engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Protocol

from .text import normalize_title

PROVENANCE_ANCHOR = "markup-anchor"
PROVENANCE_STRUCTURED = "markup-structured"
PROVENANCE_SEARCH = "search-match"
PROVENANCE_FALLBACK = "fallback"


@dataclass(frozen=True)
class Candidate:
    """Provisional identifier discovered for a normalised title key."""

    href: str
    key: str
    provenance: str
    score: Optional[float] = None


@dataclass(frozen=True)
class SearchResult:
    """Identifier and display text extracted from one search record."""

    id: str
    display_text: str


class TitleLookup(Protocol):
    """Anything that can propose a candidate for a single title."""

    def find(self, title: str) -> Optional[Candidate]:
        ...


class CandidateIndex:
    """Normalised title key to candidate mapping for one markup document.

    The first candidate stored for a key wins. The only exception is a
    ``markup-anchor`` candidate, which replaces a ``markup-structured`` one
    because anchors carry per-title precision.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Candidate] = {}

    def add(self, candidate: Candidate) -> bool:
        """Store ``candidate`` unless its key is empty or already taken."""

        if not candidate.key:
            return False
        existing = self._entries.get(candidate.key)
        if existing is not None and not _supersedes(candidate, existing):
            return False
        self._entries[candidate.key] = candidate
        return True

    def get(self, key: str) -> Optional[Candidate]:
        return self._entries.get(key)

    def find(self, title: str) -> Optional[Candidate]:
        return self._entries.get(normalize_title(title))

    def hrefs(self) -> Dict[str, str]:
        return {key: candidate.href for key, candidate in self._entries.items()}

    @property
    def degenerate(self) -> bool:
        """True when every entry came from the structured-data guess."""

        return bool(self._entries) and all(
            candidate.provenance == PROVENANCE_STRUCTURED for candidate in self._entries.values()
        )

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def _supersedes(new: Candidate, existing: Candidate) -> bool:
    return new.provenance == PROVENANCE_ANCHOR and existing.provenance == PROVENANCE_STRUCTURED


@dataclass(frozen=True)
class ResolutionResult:
    """Title to identifier mapping produced for one request."""

    title_to_id: Dict[str, str] = field(default_factory=dict)
    provenance: Dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Dict[str, str]]:
        return {"titleToId": dict(self.title_to_id)}

    def count(self, provenance: str) -> int:
        return sum(1 for tag in self.provenance.values() if tag == provenance)
