"""Shared fixtures for engine tests."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Tuple

import pytest

from toclinker.engine.config import load_config

ROOT_URL = "https://example.notion.site/Root"


@pytest.fixture()
def engine_config():
    """Provide a mutable copy of the default engine configuration."""

    return load_config(None)


def make_markup(anchors: Iterable[Tuple[str, str]], *, record_map: str | None = None) -> str:
    """Build a minimal shared-page document from ``(href, inner_html)`` pairs."""

    links = "\n".join(f'<li><a href="{href}">{inner}</a></li>' for href, inner in anchors)
    script = ""
    if record_map is not None:
        script = f"<script>window.__data = {{\"recordMap\": {{\"block\": {{{record_map}}}}}}};</script>"
    return f"<html><head>{script}</head><body><ul>{links}</ul></body></html>"


def notion_page(page_id: str, title: str, *, prop: str = "title") -> Dict[str, Any]:
    """Return a Notion search record for a page titled ``title``."""

    return {
        "object": "page",
        "id": page_id,
        "properties": {prop: {"type": "title", "title": [{"plain_text": title}]}},
    }
