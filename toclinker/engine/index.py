"""Coordinator for the two title resolution modes."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from . import markup as markup_module
from . import resolver as resolver_module
from . import search as search_module
from .config import MODE_MARKUP, MODE_SEARCH, EngineConfig, load_config
from .types import ResolutionResult

logger = logging.getLogger(__name__)

FetchMarkup = Callable[[str], str]


def resolve_markup(
    root_url: str,
    titles: Sequence[str],
    fetch_markup: FetchMarkup,
    config: EngineConfig | None = None,
) -> ResolutionResult:
    """Resolve titles from the markup of the shared root page.

    ``fetch_markup`` is called once with ``root_url``; its errors propagate
    to the caller. Titles without a candidate fall back to ``root_url``
    under the default policy.
    """

    engine_config = config or load_config(None)
    markup = fetch_markup(root_url)
    logger.info("Fetched %d characters of markup from %s", len(markup or ""), root_url)

    index = markup_module.extract_candidates(
        markup,
        markup_module.host_fragment(root_url),
        root_url=root_url,
        titles=titles,
        config=engine_config,
    )
    return resolver_module.resolve(
        titles,
        index,
        root_url,
        fallback_policy=engine_config.fallback_policy(MODE_MARKUP),
    )


def resolve_search(
    titles: Sequence[str],
    run_search: search_module.SearchFunction,
    config: EngineConfig | None = None,
    *,
    fallback_value: Optional[str] = None,
) -> ResolutionResult:
    """Resolve titles with one search query each."""

    engine_config = config or load_config(None)
    lookup = search_module.SearchLookup(run_search, min_score=engine_config.min_match_score())
    return resolver_module.resolve(
        titles,
        lookup,
        fallback_value,
        fallback_policy=engine_config.fallback_policy(MODE_SEARCH),
    )
