"""Candidate extraction from the markup of a shared root page.

Two independent heuristics feed one :class:`CandidateIndex`:

* the structured-data scan looks for the ``recordMap`` block that Notion
  embeds in server-rendered pages. Page UUIDs found there prove that the
  document contains a page graph, but cannot be tied to titles, so every
  requested title is pointed at the root page itself. These candidates are
  tagged ``markup-structured`` and mark the index as degenerate.
* the anchor scan walks ``<a href>`` elements in document order and keys
  each accepted href by the normalised visible text, tagged
  ``markup-anchor``. Anchor candidates replace structured ones.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, List, Optional, Sequence

from bs4 import BeautifulSoup, FeatureNotFound  # type: ignore

from .config import EngineConfig, load_config
from .text import collapse_whitespace, normalize_title
from .types import PROVENANCE_ANCHOR, PROVENANCE_STRUCTURED, Candidate, CandidateIndex

logger = logging.getLogger(__name__)

_HOST_RE = re.compile(r"https?://([^/]+)", flags=re.IGNORECASE)
_RECORD_MAP_RE = re.compile(r'"recordMap":\s*\{[\s\S]*?"block":\s*\{([\s\S]*?)\}')
_PAGE_ID_RE = re.compile(r'"([a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12})"')


def host_fragment(url: str) -> Optional[str]:
    """Return the ``host[:port]`` of an ``http(s)://`` URL, else ``None``."""

    if not isinstance(url, str):
        return None
    match = _HOST_RE.match(url.strip())
    return match.group(1) if match else None


def find_page_ids(markup: str) -> Optional[List[str]]:
    """Return page UUIDs from the embedded ``recordMap`` block.

    ``None`` means no block was found; an empty list means a block was found
    without any UUID-shaped tokens in it.
    """

    match = _RECORD_MAP_RE.search(markup)
    if not match:
        return None
    return _PAGE_ID_RE.findall(match.group(1))


def _parse(markup: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(markup, "lxml")
    except FeatureNotFound:
        # Fallback to html.parser if lxml isn't installed
        return BeautifulSoup(markup, "html.parser")


def _accepts_href(href: str, patterns: Sequence[re.Pattern[str]], host: Optional[str]) -> bool:
    if any(pattern.search(href) for pattern in patterns):
        return True
    return bool(host) and host in href


def iter_anchor_candidates(
    markup: str,
    host: Optional[str],
    patterns: Iterable[str],
) -> Iterator[Candidate]:
    """Yield accepted anchor candidates in document order."""

    compiled = [re.compile(pattern) for pattern in patterns]
    soup = _parse(markup)
    total = 0
    for anchor in soup.find_all("a", href=True):
        total += 1
        href = str(anchor.get("href") or "").strip()
        text = collapse_whitespace(anchor.get_text())
        if not href or not text:
            continue
        if not _accepts_href(href, compiled, host):
            continue
        key = normalize_title(text)
        logger.debug('Found link "%s" (normalized "%s") -> %s', text, key, href)
        yield Candidate(href=href, key=key, provenance=PROVENANCE_ANCHOR)
    logger.info("Scanned %d anchor elements", total)


def extract_candidates(
    markup: str,
    host: Optional[str],
    *,
    root_url: str = "",
    titles: Sequence[str] = (),
    config: EngineConfig | None = None,
) -> CandidateIndex:
    """Build the candidate index for one markup document.

    Never raises for odd input: non-string markup is treated as empty and an
    index without entries is a normal outcome that the resolver falls back
    from.
    """

    engine_config = config or load_config(None)
    index = CandidateIndex()
    if not isinstance(markup, str) or not markup:
        return index

    page_ids = find_page_ids(markup)
    if page_ids is not None and root_url and titles:
        logger.info(
            "Found recordMap data with %d page ids; assigning root URL to every title",
            len(page_ids),
        )
        for title in titles:
            index.add(Candidate(href=root_url, key=normalize_title(title), provenance=PROVENANCE_STRUCTURED))

    for candidate in iter_anchor_candidates(markup, host, engine_config.link_patterns()):
        index.add(candidate)

    logger.info("Candidate index holds %d keys (degenerate=%s)", len(index), index.degenerate)
    return index
