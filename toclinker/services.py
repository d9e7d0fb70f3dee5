"""Network collaborators for the title resolution engine.

These functions fetch the markup of a shared root page, run Notion search
queries and fetch remote sitemaps. They are kept out of the engine so the
engine can be unit tested without network access, and out of the views so
the views can be tested with these functions patched.
"""

from __future__ import annotations

import gzip
import json
import logging
import socket
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)

SITEMAP_HEADERS: Dict[str, str] = {
    'User-Agent': 'TOC-Organizer/1.0 (Sitemap Fetcher)',
    'Accept': 'application/xml, text/xml, */*',
    'Cache-Control': 'no-cache',
}

NOTION_SEARCH_URL = 'https://api.notion.com/v1/search'
NOTION_VERSION = '2022-06-28'


class FetchError(Exception):
    """Raised when a remote document cannot be fetched."""


class FetchTimeout(FetchError):
    """Raised when the remote host does not answer within the timeout."""


class HostNotFound(FetchError):
    """Raised when the remote host name does not resolve."""


class ConnectionRefused(FetchError):
    """Raised when the remote host refuses the connection."""


class UpstreamStatusError(FetchError):
    """Raised when the remote host answers with a non-2xx status."""

    def __init__(self, status: int, reason: str) -> None:
        super().__init__(f'{status} {reason}'.strip())
        self.status = status
        self.reason = reason


class SearchError(FetchError):
    """Raised when the search endpoint fails or returns something unusable."""


@dataclass(frozen=True)
class FetchedText:
    """Decoded body of a successful fetch."""

    text: str
    content_type: str


def _decode(data: bytes, url: str, content_type: str, charset: Optional[str]) -> str:
    # Decompress if .gz extension or gzip content type
    if url.lower().endswith('.gz') or 'application/x-gzip' in content_type:
        try:
            data = gzip.decompress(data)
        except OSError:
            pass
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError:
        return data.decode(charset or 'utf-8', errors='replace')


def _classify(exc: BaseException) -> type[FetchError]:
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return FetchTimeout
    if isinstance(exc, socket.gaierror):
        return HostNotFound
    if isinstance(exc, ConnectionRefusedError):
        return ConnectionRefused
    return FetchError


def fetch_text(
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    data: Optional[bytes] = None,
    method: str = 'GET',
    timeout: float = 15,
) -> FetchedText:
    """Fetch ``url`` with ``urllib.request`` and return its decoded body.

    Gzipped bodies (by extension or content type) are transparently
    decompressed. Failures are raised as :class:`FetchError` subclasses so
    callers can tell timeouts, unknown hosts, refused connections and error
    statuses apart.
    """

    request = urllib.request.Request(url, data=data, headers=dict(headers or {}), method=method)
    try:
        with urllib.request.urlopen(request, timeout=timeout) as resp:
            body = resp.read()
            content_type = resp.headers.get('Content-Type', '') or ''
            charset = resp.headers.get_content_charset()
    except urllib.error.HTTPError as exc:
        raise UpstreamStatusError(exc.code, str(exc.reason or '')) from exc
    except urllib.error.URLError as exc:
        reason = exc.reason if isinstance(exc.reason, BaseException) else exc
        raise _classify(reason)(str(exc.reason)) from exc
    except (socket.timeout, TimeoutError) as exc:
        raise FetchTimeout(f'Timed out after {timeout}s') from exc
    except (OSError, ValueError) as exc:
        raise FetchError(str(exc)) from exc

    return FetchedText(text=_decode(body, url, content_type, charset), content_type=content_type)


def fetch_markup_text(url: str, timeout: float = 15) -> str:
    """Fetch the HTML of a shared root page with a browser user agent."""

    logger.info('Fetching HTML from %s', url)
    return fetch_text(url, headers={'User-Agent': BROWSER_USER_AGENT}, timeout=timeout).text


def fetch_sitemap(url: str, timeout: float = 10) -> FetchedText:
    """Fetch a remote sitemap document."""

    logger.info('Fetching sitemap from %s', url)
    return fetch_text(url, headers=SITEMAP_HEADERS, timeout=timeout)


def looks_like_sitemap(xml_text: str) -> bool:
    """Return ``True`` for ``<urlset>`` sitemaps and ``<sitemapindex>`` files."""

    return '<urlset' in xml_text or '<sitemapindex' in xml_text


class NotionSearchClient:
    """Callable that runs one Notion page search and returns raw results.

    The token is only forwarded as a bearer credential; it is neither
    validated nor stored beyond the lifetime of the client.
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = NOTION_SEARCH_URL,
        notion_version: str = NOTION_VERSION,
        timeout: float = 15,
    ) -> None:
        self.token = token
        self.api_url = api_url
        self.notion_version = notion_version
        self.timeout = timeout

    def headers(self) -> Dict[str, str]:
        return {
            'Authorization': f'Bearer {self.token}',
            'Notion-Version': self.notion_version,
            'Content-Type': 'application/json',
        }

    @staticmethod
    def request_body(query: str) -> Dict[str, Any]:
        return {
            'query': query,
            'sort': {'direction': 'ascending', 'timestamp': 'last_edited_time'},
            'filter': {'value': 'page', 'property': 'object'},
        }

    def __call__(self, query: str) -> List[Any]:
        body = json.dumps(self.request_body(query)).encode('utf-8')
        try:
            fetched = fetch_text(
                self.api_url,
                headers=self.headers(),
                data=body,
                method='POST',
                timeout=self.timeout,
            )
        except FetchError as exc:
            raise SearchError(f'Search request failed: {exc}') from exc
        try:
            payload = json.loads(fetched.text)
        except ValueError as exc:
            raise SearchError('Search response is not valid JSON') from exc
        results = payload.get('results') if isinstance(payload, dict) else None
        return results if isinstance(results, list) else []
