"""Per-title resolution with a configurable fallback policy."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from .config import FALLBACK_ALWAYS, FALLBACK_POLICIES
from .types import PROVENANCE_FALLBACK, ResolutionResult, TitleLookup

logger = logging.getLogger(__name__)


def resolve(
    titles: Sequence[str],
    lookup: TitleLookup,
    fallback_value: Optional[str] = None,
    *,
    fallback_policy: str = FALLBACK_ALWAYS,
) -> ResolutionResult:
    """Resolve each title in input order through ``lookup``.

    With the ``always`` policy a title without a candidate maps to
    ``fallback_value``, so every title appears in the result. With
    ``never`` such titles are left out.
    """

    if fallback_policy not in FALLBACK_POLICIES:
        raise ValueError(f"Unknown fallback policy: {fallback_policy!r}")
    if fallback_policy == FALLBACK_ALWAYS and not fallback_value:
        raise ValueError("The 'always' fallback policy needs a fallback value")

    title_to_id: Dict[str, str] = {}
    provenance: Dict[str, str] = {}
    for title in titles:
        candidate = lookup.find(title)
        if candidate is not None:
            title_to_id[title] = candidate.href
            provenance[title] = candidate.provenance
            logger.debug('Matched title "%s" -> %s (%s)', title, candidate.href, candidate.provenance)
        elif fallback_policy == FALLBACK_ALWAYS:
            title_to_id[title] = fallback_value  # type: ignore[assignment]
            provenance[title] = PROVENANCE_FALLBACK
            logger.debug('Using fallback for title "%s" -> %s', title, fallback_value)
        else:
            logger.debug('No candidate for title "%s"', title)

    result = ResolutionResult(title_to_id=title_to_id, provenance=provenance)
    logger.info(
        "Resolved %d of %d titles (%d via fallback)",
        len(title_to_id),
        len(titles),
        result.count(PROVENANCE_FALLBACK),
    )
    return result
