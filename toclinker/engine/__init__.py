"""Title resolution engine.

The engine is pure logic: it never performs network I/O itself and takes
the markup fetcher and the search function as injected callables.
"""

from __future__ import annotations

from .config import EngineConfig, load_config
from .index import resolve_markup, resolve_search
from .text import normalize_title
from .types import Candidate, CandidateIndex, ResolutionResult, SearchResult

__all__ = [
    "Candidate",
    "CandidateIndex",
    "EngineConfig",
    "ResolutionResult",
    "SearchResult",
    "load_config",
    "normalize_title",
    "resolve_markup",
    "resolve_search",
]
